from .export import export_view, render_csv, render_json, render_table

__all__ = ["export_view", "render_csv", "render_json", "render_table"]
