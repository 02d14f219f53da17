"""Structural validation of email addresses."""

_FORBIDDEN = (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\")


def is_valid_email(email: str | None) -> bool:
    """Check that an email address follows a basic valid structure.

    Exactly one ``@``, non-empty local and domain parts without leading or
    trailing dots, a dotted domain whose labels do not start or end with a
    hyphen, no consecutive dots, no whitespace and no forbidden characters.
    """
    if not email:
        return False

    if any(ch.isspace() for ch in email):
        return False

    if email.count("@") != 1:
        return False

    local_part, domain_part = email.split("@", 1)

    if not local_part or local_part.startswith(".") or local_part.endswith("."):
        return False

    if not domain_part or domain_part.startswith(".") or domain_part.endswith("."):
        return False

    if "." not in domain_part:
        return False

    if any(label.startswith("-") or label.endswith("-") for label in domain_part.split(".")):
        return False

    if ".." in email:
        return False

    return not any(forbidden in email for forbidden in _FORBIDDEN)
