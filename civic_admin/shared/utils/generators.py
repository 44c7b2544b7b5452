"""Document id generation for writes made by this service."""

from cuid2 import Cuid

# Same length as the auto ids Firestore hands out to the mobile client.
DOCUMENT_ID_LENGTH = 20

_document_ids = Cuid(length=DOCUMENT_ID_LENGTH)


def new_document_id() -> str:
    """CUID2 id for a document created with ``add()`` or ``document()``."""
    return _document_ids.generate()
