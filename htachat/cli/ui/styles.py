"""Questionary prompt style."""

from questionary import Style

htachat_style = Style(
    [
        ("qmark", "fg:#1a73e8 bold"),
        ("question", "bold"),
        ("answer", "fg:#1a73e8"),
        ("instruction", "fg:#888888 italic"),
    ]
)
