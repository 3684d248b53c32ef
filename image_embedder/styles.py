"""Stylesheets: CSS handed to the chat host and QSS for the settings panel."""

from image_embedder.resolver import FAILED_CLASS, MARKER_CLASS

EMBED_CSS = f"""
.{MARKER_CLASS} {{
    border-radius: 8px;
    margin: 10px 0;
    box-shadow: 0 2px 5px rgba(0, 0, 0, 0.1);
    display: block;
}}

.{FAILED_CLASS} {{
    color: #a0a0a0;
    font-style: italic;
}}

.image-embedder-settings {{
    padding: 15px;
    border: 1px solid var(--border-color);
    border-radius: 8px;
    margin-bottom: 20px;
}}
"""

PANEL_QSS = """
    QWidget#imageEmbedderSettings {
        padding: 12px;
    }
    QLabel#statusLabel {
        color: #5D5D5D;
    }
    QLabel#statusLabel[error="true"] {
        color: #C42B1C;
    }
    QLineEdit[readOnly="true"] {
        background: transparent;
    }
"""
