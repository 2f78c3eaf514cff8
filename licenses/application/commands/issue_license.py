"""
IssueLicenseCommand.

Command to issue a license for an allow-listed user ID.
"""
from dataclasses import dataclass


@dataclass
class IssueLicenseCommand:
    """
    Command to issue a license.

    The user ID is consumed on success; name and phone are stored on the
    license as given.
    """

    user_id: str
    email: str
    name: str
    phone_number: str
