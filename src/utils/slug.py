import re


def slugify(text):
    # Drop apostrophes ("kyle's" -> "kyles"), then collapse every other run
    # of non alphanumerics into a single hyphen
    slug = text.strip().lower().replace("'", "")
    slug = re.sub(r"[^a-z0-9]+", "-", slug)
    return slug.strip("-")
