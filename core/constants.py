# constants.py
import string

# Donation identifiers look like DON-7Q2XK9A
DONATION_ID_PREFIX = "DON-"
DONATION_ID_LENGTH = 7
DONATION_ID_ALPHABET = string.ascii_uppercase + string.digits

ANONYMOUS_DONOR = "Anonymous Donor"
MAX_DONOR_NAME_LENGTH = 200

MESSAGES = {
    "donation.created": "Thank you for sponsoring {quantity} {trees}! Your donation is now pending verification.",
    "donation.status_updated": "Donation status updated successfully!",
    "settings.updated": "Settings updated successfully!",
}

# largest value the integer columns hold on every supported backend (signed 32-bit)
MAX_COLUMN_INTEGER = 2_147_483_647
