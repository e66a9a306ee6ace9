from markupsafe import Markup


def clean(value: str | None) -> str:
    """Trim a submitted field and strip any markup from it.

    Plain punctuation such as ``'`` and ``&`` is kept as typed; templates
    escape on output.
    """
    if value is None:
        return ''
    return Markup(value.strip()).striptags()
