from PyQt6 import QtGui, QtWidgets


def theme_palette(name: str) -> dict[str, str]:
    if name == "dark":
        return {
            "window": "#15181B",
            "base": "#1C2024",
            "base_alt": "#23282D",
            "text": "#E4E6E8",
            "muted": "#9AA3AB",
            "border": "#30363C",
            "header": "#2B3A47",
            "header_text": "#F3F6F8",
            "notice": "#3A3120",
            "accent": "#5AA9E6",
            "accent_text": "#0E1114",
        }
    return {
        "window": "#F7F7F5",
        "base": "#FFFFFF",
        "base_alt": "#F3F2EE",
        "text": "#1E1F21",
        "muted": "#5E6366",
        "border": "#D8D6D0",
        "header": "#E3ECF5",
        "header_text": "#13202C",
        "notice": "#FFF4D6",
        "accent": "#2F7CC0",
        "accent_text": "#FFFFFF",
    }


def apply_theme(app: QtWidgets.QApplication, name: str) -> None:
    app.setStyle("Fusion")
    colors = theme_palette(name)
    palette = QtGui.QPalette()
    roles = {
        QtGui.QPalette.ColorRole.Window: colors["window"],
        QtGui.QPalette.ColorRole.WindowText: colors["text"],
        QtGui.QPalette.ColorRole.Base: colors["base"],
        QtGui.QPalette.ColorRole.AlternateBase: colors["base_alt"],
        QtGui.QPalette.ColorRole.Text: colors["text"],
        QtGui.QPalette.ColorRole.Button: colors["base"],
        QtGui.QPalette.ColorRole.ButtonText: colors["text"],
        QtGui.QPalette.ColorRole.Highlight: colors["accent"],
        QtGui.QPalette.ColorRole.HighlightedText: colors["accent_text"],
    }
    for role, color in roles.items():
        palette.setColor(role, QtGui.QColor(color))
    app.setPalette(palette)

    app.setStyleSheet(
        f"""
        QTableView {{
            background: {colors['base']};
            alternate-background-color: {colors['base_alt']};
            gridline-color: {colors['border']};
            selection-background-color: {colors['accent']};
            selection-color: {colors['accent_text']};
        }}
        QToolButton {{
            border: 1px solid {colors['border']};
            border-radius: 6px;
            padding: 4px 10px;
        }}
        QToolButton:checked {{
            border-color: {colors['accent']};
        }}
        QLabel#tableNotice {{
            background: {colors['notice']};
            color: {colors['text']};
            padding: 4px 8px;
        }}
        QStatusBar {{
            color: {colors['muted']};
        }}
        """
    )
