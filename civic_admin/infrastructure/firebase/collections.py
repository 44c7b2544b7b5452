"""Firestore collection names (schema-in-code).

Firestore has no DDL or migrations. The reporting client and this service
share these collections, so the names are fixed.
"""

COLLECTION_ISSUES = "civicIssues"
SUBCOLLECTION_COMMENTS = "comments"

COLLECTION_DEPARTMENTS = "departments"
COLLECTION_ASSIGNMENT_RULES = "autoAssignmentRules"

COLLECTION_USERS = "users"
SUBCOLLECTION_USER_NOTIFICATIONS = "notifications"

COLLECTION_NOTIFICATION_LOGS = "notificationLogs"
COLLECTION_NOTIFICATION_TEMPLATES = "notificationTemplates"
COLLECTION_AUTOMATION_RULES = "automationRules"
