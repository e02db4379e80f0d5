"""
HTML formatting helpers for the generation panel.
"""

import html

from printforge.models.model_record import ModelMeta


class UIUtils:
    """Utility functions for UI operations."""

    @staticmethod
    def format_status_html(kind: str, title: str, detail: str | None = None) -> str:
        """Render a status line; kind is one of success, warning, error."""
        icons = {"success": "✅", "warning": "⚠️", "error": "❌"}
        body = f"{icons.get(kind, '')} <strong>{html.escape(title)}</strong>"
        if detail:
            body += f"<br><small>{html.escape(detail)}</small>"
        return f'<div class="status-{kind}">{body}</div>'

    @staticmethod
    def format_progress_html(progress: int, message: str | None = None) -> str:
        progress = max(0, min(100, int(progress)))
        return (
            '<div class="progress-container">'
            '<div class="progress-bar">'
            f'<div class="progress-fill" style="width: {progress}%"></div>'
            "</div>"
            f"<p>{html.escape(message or 'Processing...')} ({progress}%)</p>"
            "</div>"
        )

    @staticmethod
    def format_model_card_html(record: ModelMeta | None) -> str:
        """Format a generated model record as a result card."""
        if record is None:
            return '<div class="no-model">No model generated yet.</div>'

        rows = {"Name": record.name, "Description": record.description, "Tags": ", ".join(record.tags)}
        if record.bbox_mm is not None:
            bbox = record.bbox_mm
            rows["Bounding box"] = f"{bbox.x:g} x {bbox.y:g} x {bbox.z:g} mm"
        if record.volume_cm3 is not None:
            rows["Volume"] = f"{record.volume_cm3:.2f} cm³"
        if record.area_cm2 is not None:
            rows["Surface area"] = f"{record.area_cm2:.2f} cm²"
        if record.weight_g is not None:
            rows["Estimated weight"] = f"{record.weight_g:.1f} g"
        if record.faces is not None:
            rows["Faces"] = f"{record.faces:,}"

        card = '<div class="model-card">'
        if record.preview_url:
            card += f'<img src="{html.escape(record.preview_url)}" alt="{html.escape(record.name)}">'
        card += f"<h4>{html.escape(record.name)}</h4>"
        for label, value in rows.items():
            if not value:
                continue
            card += f'<div class="metadata-grid"><strong>{label}:</strong> {html.escape(str(value))}</div>'

        links = [(fmt, url) for fmt, url in (("GLB", record.glb_url), ("STL", record.stl_url)) if url]
        if links:
            card += '<div class="metadata-grid"><strong>Downloads:</strong> '
            card += " | ".join(f'<a href="{html.escape(url)}" target="_blank">{fmt}</a>' for fmt, url in links)
            card += "</div>"

        card += "</div>"
        return card
