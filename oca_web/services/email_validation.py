import re

_EMAIL_RE = re.compile(r"^[a-zA-Z0-9!#$%&'*+/=?^_`{|}~.-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def email_problem(email: str) -> str:
    """
    Returns a specific, human-readable reason the address is invalid,
    or "" when it looks deliverable. An empty address is not an error here;
    callers decide whether the field is required.
    """
    email = (email or "").strip()
    if not email:
        return ""

    at_index = email.find("@")
    if at_index == -1:
        return "Email must include an '@' symbol."
    if at_index == 0:
        return "Please enter the part before the '@'."
    if email.count("@") > 1:
        return "Email can only contain one '@' symbol."

    domain = email.split("@", 1)[1]
    if not domain:
        return "Please enter the part after the '@'."
    if "." not in domain:
        return "The domain is missing a '.' (e.g., example.com)."
    if domain.startswith(".") or domain.endswith("."):
        return "The domain cannot start or end with a dot."
    if ".." in domain:
        return "The domain cannot have consecutive dots."

    tld = domain.rsplit(".", 1)[-1]
    if len(tld) < 2:
        return "The top-level domain (e.g., .com) must be at least two characters."

    if not _EMAIL_RE.match(email):
        return "The email contains invalid characters."
    return ""
