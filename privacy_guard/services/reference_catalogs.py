"""
Fixed installation catalogs.

Versioned configuration data seeded by the installer. Each catalog is a
tuple of column dicts that maps 1:1 onto its table; nothing here is
generated at runtime.

    Reference lookups:   7 data categories, 5 consent statuses,
                         5 DSAR statuses, 6 regulations, 4 incident statuses
    Default configs:     6 alert settings, 6 retention policies
"""

CATALOG_VERSION = "1.0"

# ═══════════════════════════════════════════════════════════════
# REFERENCE LOOKUPS
# ═══════════════════════════════════════════════════════════════
DATA_CATEGORIES = (
    {"id": "personal", "name": "personal", "description": "Personal identification data", "icon": "user", "sort_order": 1},
    {"id": "sensitive", "name": "sensitive", "description": "Sensitive personal data", "icon": "shield", "sort_order": 2},
    {"id": "financial", "name": "financial", "description": "Financial and payment data", "icon": "credit-card", "sort_order": 3},
    {"id": "behavioral", "name": "behavioral", "description": "Behavioral and usage data", "icon": "activity", "sort_order": 4},
    {"id": "technical", "name": "technical", "description": "Technical and system data", "icon": "cpu", "sort_order": 5},
    {"id": "biometric", "name": "biometric", "description": "Biometric data", "icon": "fingerprint", "sort_order": 6},
    {"id": "location", "name": "location", "description": "Location and geographic data", "icon": "map-pin", "sort_order": 7},
)

CONSENT_STATUSES = (
    {"id": "granted", "name": "granted", "description": "Consent has been granted", "color": "green", "sort_order": 1},
    {"id": "withdrawn", "name": "withdrawn", "description": "Consent has been withdrawn", "color": "red", "sort_order": 2},
    {"id": "pending", "name": "pending", "description": "Consent is pending", "color": "yellow", "sort_order": 3},
    {"id": "expired", "name": "expired", "description": "Consent has expired", "color": "gray", "sort_order": 4},
    {"id": "partial", "name": "partial", "description": "Partial consent granted", "color": "orange", "sort_order": 5},
)

DSAR_STATUSES = (
    {"id": "submitted", "name": "submitted", "description": "Request has been submitted", "color": "blue", "sort_order": 1},
    {"id": "in_progress", "name": "in_progress", "description": "Request is being processed", "color": "yellow", "sort_order": 2},
    {"id": "completed", "name": "completed", "description": "Request has been completed", "color": "green", "sort_order": 3},
    {"id": "rejected", "name": "rejected", "description": "Request has been rejected", "color": "red", "sort_order": 4},
    {"id": "cancelled", "name": "cancelled", "description": "Request has been cancelled", "color": "gray", "sort_order": 5},
)

REGULATIONS = (
    {"id": "gdpr", "name": "GDPR", "full_name": "General Data Protection Regulation",
     "description": "EU data protection regulation", "jurisdiction": "EU", "sort_order": 1},
    {"id": "ccpa", "name": "CCPA", "full_name": "California Consumer Privacy Act",
     "description": "California privacy law", "jurisdiction": "California, US", "sort_order": 2},
    {"id": "uk_dpa", "name": "UK_DPA", "full_name": "UK Data Protection Act",
     "description": "UK data protection law", "jurisdiction": "United Kingdom", "sort_order": 3},
    {"id": "pipeda", "name": "PIPEDA", "full_name": "Personal Information Protection and Electronic Documents Act",
     "description": "Canadian privacy law", "jurisdiction": "Canada", "sort_order": 4},
    {"id": "lgpd", "name": "LGPD", "full_name": "Lei Geral de Proteção de Dados",
     "description": "Brazilian data protection law", "jurisdiction": "Brazil", "sort_order": 5},
    {"id": "cdpa", "name": "CDPA", "full_name": "Consumer Data Protection Act",
     "description": "Virginia privacy law", "jurisdiction": "Virginia, US", "sort_order": 6},
)

INCIDENT_STATUSES = (
    {"id": "open", "name": "open", "description": "Incident is open and being investigated", "color": "red", "sort_order": 1},
    {"id": "investigating", "name": "investigating", "description": "Incident is under investigation", "color": "yellow", "sort_order": 2},
    {"id": "resolved", "name": "resolved", "description": "Incident has been resolved", "color": "green", "sort_order": 3},
    {"id": "closed", "name": "closed", "description": "Incident has been closed", "color": "gray", "sort_order": 4},
)


# ═══════════════════════════════════════════════════════════════
# DEFAULT CONFIGURATIONS
# ═══════════════════════════════════════════════════════════════
DEFAULT_ALERT_SETTINGS = (
    {"id": "ssl_expiry_30", "alert_type": "ssl_expiry", "threshold_days": 30, "is_enabled": True,
     "notification_methods": ["email"]},
    {"id": "ssl_expiry_15", "alert_type": "ssl_expiry", "threshold_days": 15, "is_enabled": True,
     "notification_methods": ["email"]},
    {"id": "ssl_expiry_7", "alert_type": "ssl_expiry", "threshold_days": 7, "is_enabled": True,
     "notification_methods": ["email", "sms"]},
    {"id": "ssl_expiry_1", "alert_type": "ssl_expiry", "threshold_days": 1, "is_enabled": True,
     "notification_methods": ["email", "sms", "slack"]},
    {"id": "dsar_overdue", "alert_type": "dsar_overdue", "threshold_days": 0, "is_enabled": True,
     "notification_methods": ["email"]},
    {"id": "consent_expiry", "alert_type": "consent_expiry", "threshold_days": 30, "is_enabled": True,
     "notification_methods": ["email"]},
)

DEFAULT_RETENTION_POLICIES = (
    {"id": "personal_contract", "data_category": "personal", "retention_period": "7 years",
     "legal_basis": "contract", "description": "Personal data for contractual purposes"},
    {"id": "personal_consent", "data_category": "personal", "retention_period": "2 years",
     "legal_basis": "consent", "description": "Personal data based on consent"},
    {"id": "financial_legal", "data_category": "financial", "retention_period": "7 years",
     "legal_basis": "legal_obligation", "description": "Financial data for legal compliance"},
    {"id": "sensitive_consent", "data_category": "sensitive", "retention_period": "1 year",
     "legal_basis": "consent", "description": "Sensitive data requiring explicit consent"},
    {"id": "technical_legitimate", "data_category": "technical", "retention_period": "2 years",
     "legal_basis": "legitimate_interest", "description": "Technical data for system operation"},
    {"id": "behavioral_consent", "data_category": "behavioral", "retention_period": "2 years",
     "legal_basis": "consent", "description": "Behavioral data for analytics"},
)
