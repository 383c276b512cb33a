def mask_email(email: str) -> str:
    """Hide the local part of an address for logs: jane@example.com -> j***@example.com"""
    local, sep, domain = (email or "").partition("@")
    if not sep or not local:
        return "***"
    return f"{local[0]}***@{domain}"
