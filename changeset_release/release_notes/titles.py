"""Formats package names as human readable titles."""


def format_package_title(package_name: str) -> str:
    """Turn a package name into a title, e.g. '@backstage/plugin-tech-docs' into 'Tech Docs'.

    The first dash-separated word (the scope and prefix) is dropped and the
    remaining words are capitalized. Names without a dash are used as-is.
    """
    words = package_name.split("-")[1:]
    words = [word for word in words if word]
    if not words:
        return package_name
    return " ".join(word[0].upper() + word[1:].lower() for word in words)
