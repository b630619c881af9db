"""
Project-wide configuration constants.

This module defines the static tables shared by the scanner, catalog,
masking and CLI layers. Nothing here touches the filesystem or the
environment; every value is a plain constant.

Module Contents:
    APP_NAME: Application name for display purposes
    TOKEN_PREFIX / TOKEN_SUFFIX: Shape of protection tokens (__PH_0__)
    TEMPLATE_FIELDS: The ten template fields scanned by the catalog
    PREVIEW_FIELDS: Template fields rendered by a preview
    TRANSLATABLE_FIELDS: Template fields sent through a translator
    MAX_EXAMPLES: Raw examples kept per catalog location
    STANDARD_PLACEHOLDERS: Descriptions of well-known merge tags

Example:
    >>> from mergeguard.config import STANDARD_PLACEHOLDERS
    >>> STANDARD_PLACEHOLDERS["FNAME"]
    'Recipient first name'
"""

# Application name for display and identification
APP_NAME = "mergeguard"

# Protection tokens look like __PH_0__, __PH_1__, ...
TOKEN_PREFIX = "__PH_"
TOKEN_SUFFIX = "__"

# Fields of a hosted template, main variant first then the published variant
TEMPLATE_FIELDS = (
    "code",
    "text",
    "subject",
    "from_name",
    "from_email",
    "publish_code",
    "publish_text",
    "publish_subject",
    "publish_from_name",
    "publish_from_email",
)

# Fields rendered by a preview (published variants are never previewed)
PREVIEW_FIELDS = ("subject", "from_name", "from_email", "code", "text")

# Fields worth sending to a translator; addresses are left alone
TRANSLATABLE_FIELDS = ("code", "text", "subject", "from_name")

# Distinct raw strings kept per catalog location
MAX_EXAMPLES = 3

# Human-readable descriptions of well-known merge tags
STANDARD_PLACEHOLDERS = {
    "FNAME": "Recipient first name",
    "LNAME": "Recipient last name",
    "EMAIL": "Recipient email address",
    "COMPANY": "Recipient company name",
    "PHONE": "Recipient phone number",
    "ADDRESS": "Recipient street address",
    "CITY": "Recipient city",
    "STATE": "Recipient state/province",
    "ZIP": "Recipient postal code",
    "COUNTRY": "Recipient country",
    "UNSUBSCRIBE": "Unsubscribe URL",
    "LIST_UNSUBSCRIBE": "List unsubscribe header",
    "SUBJECT": "Email subject line",
    "MC_PREVIEW_TEXT": "Preview text for inbox",
    "CURRENT_YEAR": "Current year",
}

# Log line layout used by the CLI
LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
