import flet as ft
from typing import Optional

from securepass.client.context import AppContext
from securepass.client.manager import RecordManager
from securepass.core.generator import generate_for
from securepass.core.index import ALL_CATEGORIES
from securepass.core.models import RecordKind, Status, VaultRecord
from securepass.core.pagination import PAGE_SIZES
from securepass.core.validator import empty_form, form_from_record
from .common import app_bar, badge, show_notices

# (wire name, label, multiline)
FORM_FIELDS = {
    RecordKind.API_KEY: [("modelName", "AI Model Name", False), ("secretValue", "API Key", False)],
    RecordKind.PASSWORD: [
        ("appName", "App/Platform", False),
        ("username", "Username/Email", False),
        ("secretValue", "Password", False),
    ],
    RecordKind.NOTE: [("title", "Title", False), ("content", "Content", True)],
}

SEARCH_HINTS = {
    RecordKind.API_KEY: "Search by model name or tag...",
    RecordKind.PASSWORD: "Search by app, username or tag...",
    RecordKind.NOTE: "Search by title, content or tag...",
}


def _columns(kind: RecordKind) -> list[str]:
    if kind is RecordKind.API_KEY:
        return ["Model Name", "API Key", "Tags", "Status", "Actions"]
    if kind is RecordKind.PASSWORD:
        return ["App", "Username", "Password", "Tags", "Status", "Actions"]
    return ["Title", "Content", "Tags", "Actions"]


def _preview(text: str, limit: int = 60) -> str:
    text = " ".join(text.split())
    return text if len(text) <= limit else text[:limit - 1] + "…"


def RecordsView(page: ft.Page, ctx: AppContext, kind: RecordKind, route: str):
    manager: RecordManager = ctx.managers[kind]

    search_field = ft.TextField(
        prefix_icon="search",
        hint_text=SEARCH_HINTS[kind],
        value=manager.query,
        expand=True,
        on_change=lambda e: manager.set_query(e.control.value or "")
    )
    category_dropdown = ft.Dropdown(
        label="Platform",
        width=220,
        value=manager.category,
        options=[],
        visible=kind is RecordKind.PASSWORD,
        on_change=lambda e: manager.set_category(e.control.value or ALL_CATEGORIES),
    )
    table = ft.DataTable(columns=[ft.DataColumn(ft.Text(name)) for name in _columns(kind)], rows=[])
    empty_text = ft.Text(f"No {kind.label.lower()} found.", color="grey", visible=False)
    progress = ft.ProgressBar(visible=False)

    page_size_dropdown = ft.Dropdown(
        label="Rows per page",
        width=140,
        value=str(manager.pagination.page_size),
        options=[ft.dropdown.Option(key=str(size), text=str(size)) for size in PAGE_SIZES],
        on_change=lambda e: manager.set_page_size(int(e.control.value)),
    )
    page_label = ft.Text("")
    prev_button = ft.IconButton(icon="chevron_left", tooltip="Previous", on_click=lambda e: manager.previous_page())
    next_button = ft.IconButton(icon="chevron_right", tooltip="Next", on_click=lambda e: manager.next_page())

    # --- rendering ---

    def secret_cell(record: VaultRecord) -> ft.DataCell:
        visible = manager.visibility.is_visible(record.id)
        return ft.DataCell(ft.Row([
            ft.Text(manager.display_secret(record), font_family="monospace", selectable=visible),
            ft.IconButton(
                icon="visibility_off" if visible else "visibility",
                tooltip="Hide" if visible else "Show",
                on_click=lambda e, rid=record.id: manager.toggle_visibility(rid),
            ),
            ft.IconButton(icon="copy", tooltip="Copy", on_click=lambda e, r=record: copy_secret(r)),
        ], spacing=0))

    def tags_cell(record: VaultRecord) -> ft.DataCell:
        return ft.DataCell(ft.Row([badge(tag) for tag in record.tags], spacing=4, wrap=True))

    def status_cell(record: VaultRecord) -> ft.DataCell:
        status = record.status  # type: ignore[attr-defined]
        if status is Status.ACTIVE:
            return ft.DataCell(badge(status.value, bgcolor="green100", color="green800"))
        return ft.DataCell(badge(status.value))

    def actions_cell(record: VaultRecord) -> ft.DataCell:
        return ft.DataCell(ft.Row([
            ft.IconButton(icon="edit", tooltip="Edit", on_click=lambda e, r=record: show_edit_dialog(r)),
            ft.IconButton(icon="delete", tooltip="Delete", icon_color="red", on_click=lambda e, r=record: confirm_delete(r)),
        ], spacing=0))

    def build_row(record: VaultRecord) -> ft.DataRow:
        if kind is RecordKind.API_KEY:
            cells = [ft.DataCell(ft.Text(record.model_name, weight=ft.FontWeight.BOLD)),  # type: ignore[attr-defined]
                     secret_cell(record), tags_cell(record), status_cell(record)]
        elif kind is RecordKind.PASSWORD:
            cells = [ft.DataCell(ft.Text(record.app_name, weight=ft.FontWeight.BOLD)),  # type: ignore[attr-defined]
                     ft.DataCell(ft.Text(record.username)),  # type: ignore[attr-defined]
                     secret_cell(record), tags_cell(record), status_cell(record)]
        else:
            cells = [ft.DataCell(ft.Text(record.title, weight=ft.FontWeight.BOLD)),  # type: ignore[attr-defined]
                     ft.DataCell(ft.Text(_preview(record.content), color="grey")),  # type: ignore[attr-defined]
                     tags_cell(record)]
        cells.append(actions_cell(record))
        return ft.DataRow(cells=cells)

    def render():
        progress.visible = manager.loading
        if kind is RecordKind.PASSWORD:
            category_dropdown.options = [ft.dropdown.Option(key=ALL_CATEGORIES, text="All Platforms")] + [
                ft.dropdown.Option(key=name, text=name) for name in manager.platforms
            ]
            category_dropdown.value = manager.category
        table.rows = [build_row(record) for record in manager.page]
        empty_text.visible = not manager.loading and not manager.filtered
        pagination = manager.pagination
        page_size_dropdown.value = str(pagination.page_size)
        page_label.value = f"{pagination.label}  ({pagination.total} total)"
        prev_button.disabled = not pagination.has_previous
        next_button.disabled = not pagination.has_next
        show_notices(page, manager.take_notices())
        page.update()

    remove_listener = manager.add_listener(render)

    # --- actions ---

    def copy_secret(record: VaultRecord):
        page.set_clipboard(manager.copy_secret(record))

    def confirm_delete(record: VaultRecord):
        async def do_delete():
            page.close(confirm_dlg)
            await manager.delete(record.id)

        confirm_dlg = ft.AlertDialog(
            title=ft.Text("Are you sure?"),
            content=ft.Text(
                f"This action cannot be undone. This will permanently delete the "
                f"{kind.singular.lower()} for {record.display_name}."
            ),
            actions=[
                ft.TextButton("Cancel", on_click=lambda e: page.close(confirm_dlg)),
                ft.ElevatedButton("Delete", color="white", bgcolor="red", on_click=lambda e: page.run_task(do_delete)),
            ],
        )
        page.open(confirm_dlg)

    def show_edit_dialog(record: Optional[VaultRecord] = None):
        is_edit = record is not None
        form = form_from_record(record) if record is not None else empty_form(kind)

        inputs: dict[str, ft.TextField] = {}
        for name, label, multiline in FORM_FIELDS[kind]:
            inputs[name] = ft.TextField(
                label=label,
                value=form.get(name, ""),
                multiline=multiline,
                min_lines=4 if multiline else None,
                password=name == "secretValue",
                can_reveal_password=name == "secretValue",
            )
        tags_tf = ft.TextField(label="Tags", hint_text="work, personal, finance", prefix_icon="sell", value=form.get("tags", ""))
        status_dd = ft.Dropdown(
            label="Status",
            value=form.get("status", Status.ACTIVE.value),
            options=[ft.dropdown.Option(key=s.value, text=s.value) for s in Status],
            visible=kind.has_secret,
        )

        custom_rows = ft.Column(spacing=8)

        def add_custom_row(label: str = "", value: str = ""):
            label_tf = ft.TextField(label="Label", value=label, expand=True)
            value_tf = ft.TextField(label="Value", value=value, expand=True)
            row = ft.Row([label_tf, value_tf], vertical_alignment=ft.CrossAxisAlignment.START)

            def remove_row(e):
                custom_rows.controls.remove(row)
                custom_rows.update()

            row.controls.append(ft.IconButton(icon="close", icon_color="red", on_click=remove_row))
            custom_rows.controls.append(row)

        for field in form.get("customFields", []):
            add_custom_row(field["label"], field["value"])

        def on_add_custom(e):
            add_custom_row()
            custom_rows.update()

        def generate(e):
            inputs["secretValue"].value = generate_for(kind)
            inputs["secretValue"].update()

        def collect() -> dict:
            data = {name: tf.value or "" for name, tf in inputs.items()}
            data["tags"] = tags_tf.value or ""
            if kind.has_secret:
                data["status"] = status_dd.value
            data["customFields"] = [
                {"label": row.controls[0].value or "", "value": row.controls[1].value or ""}  # type: ignore[attr-defined]
                for row in custom_rows.controls
            ]
            return data

        def show_errors():
            errors = manager.form_errors
            for name, tf in inputs.items():
                tf.error_text = errors.get(name, [None])[0]
            status_dd.error_text = errors.get("status", [None])[0]
            for index, row in enumerate(custom_rows.controls):
                row.controls[0].error_text = errors.get(f"customFields.{index}.label", [None])[0]  # type: ignore[attr-defined]
                row.controls[1].error_text = errors.get(f"customFields.{index}.value", [None])[0]  # type: ignore[attr-defined]
            page.update()

        async def save():
            saved = await manager.submit(collect(), editing_id=record.id if record is not None else None)
            if saved:
                page.close(dlg)
            else:
                show_errors()

        field_controls: list[ft.Control] = []
        for name, _, _ in FORM_FIELDS[kind]:
            if name == "secretValue":
                field_controls.append(ft.Row(
                    [ft.Container(inputs[name], expand=True),
                     ft.IconButton(icon="refresh", tooltip="Generate", on_click=generate)],
                    alignment=ft.MainAxisAlignment.SPACE_BETWEEN
                ))
            else:
                field_controls.append(inputs[name])

        dlg = ft.AlertDialog(
            title=ft.Text(f"Edit {kind.singular}" if is_edit else f"Add New {kind.singular}"),
            content=ft.Column([
                *field_controls,
                tags_tf,
                status_dd,
                ft.Divider(),
                ft.Text("Custom Fields", weight=ft.FontWeight.BOLD),
                custom_rows,
                ft.TextButton("Add Custom Field", icon="add", on_click=on_add_custom),
            ], tight=True, width=480, scroll=ft.ScrollMode.AUTO),
            actions=[
                ft.TextButton("Cancel", on_click=lambda e: page.close(dlg)),
                ft.ElevatedButton("Save", on_click=lambda e: page.run_task(save)),
            ],
        )
        page.open(dlg)

    view = ft.View(
        route,
        controls=[
            app_bar(page, ctx, kind.label),
            progress,
            ft.Container(ft.Row([search_field, category_dropdown]), padding=10),
            ft.Column([table, empty_text], scroll=ft.ScrollMode.AUTO, expand=True),
            ft.Row(
                [page_size_dropdown, prev_button, page_label, next_button],
                alignment=ft.MainAxisAlignment.END,
            ),
        ],
        floating_action_button=ft.FloatingActionButton(
            icon="add",
            on_click=lambda e: show_edit_dialog(None),
            text="Add"
        )
    )
    # the next route change rebuilds the view; stop rendering into this one
    view.data = remove_listener
    page.run_task(manager.refresh)
    return view
