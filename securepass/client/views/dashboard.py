import flet as ft

from securepass.client.context import AppContext
from securepass.core.aggregator import FrequencyEntry
from .common import app_bar, show_notices


def _count_card(label: str, icon: str, value_text: ft.Text) -> ft.Container:
    return ft.Container(
        content=ft.Column([
            ft.Row([ft.Icon(name=icon, color="blue"), ft.Text(label, size=14, color="grey")]),
            value_text,
        ], spacing=4),
        padding=16, border=ft.border.all(1, "grey300"), border_radius=10, bgcolor="white", expand=True,
    )


def _frequency_rows(entries: list[FrequencyEntry], empty_text: str) -> list[ft.Control]:
    if not entries:
        return [ft.Text(empty_text, color="grey")]
    top = max(e.count for e in entries)
    return [
        ft.Row([
            ft.Text(e.name, width=140),
            ft.ProgressBar(value=e.count / top, expand=True),
            ft.Text(str(e.count), width=40, text_align=ft.TextAlign.RIGHT),
        ])
        for e in entries
    ]


def DashboardView(page: ft.Page, ctx: AppContext):
    api_keys_text = ft.Text("-", size=24, weight=ft.FontWeight.BOLD)
    passwords_text = ft.Text("-", size=24, weight=ft.FontWeight.BOLD)
    notes_text = ft.Text("-", size=24, weight=ft.FontWeight.BOLD)
    total_text = ft.Text("", color="grey")
    tags_column = ft.Column(spacing=6)
    platforms_column = ft.Column(spacing=6)
    progress = ft.ProgressBar(visible=True)

    def render():
        summary = ctx.dashboard.summary
        progress.visible = ctx.dashboard.loading
        if summary is not None:
            api_keys_text.value = str(summary.api_keys)
            passwords_text.value = str(summary.passwords)
            notes_text.value = str(summary.notes)
            total_text.value = f"{summary.total} items in your vault"
            tags_column.controls = _frequency_rows(summary.top_tags, "No tag data available.")
            platforms_column.controls = _frequency_rows(summary.top_platforms, "No platform data available.")
        show_notices(page, ctx.dashboard.notices)
        ctx.dashboard.notices.clear()
        page.update()

    async def load():
        await ctx.dashboard.load()
        render()

    page.run_task(load)

    return ft.View(
        "/dashboard",
        controls=[
            app_bar(page, ctx, "Dashboard"),
            progress,
            ft.Container(
                content=ft.Column([
                    ft.Row([
                        _count_card("API Keys", "key", api_keys_text),
                        _count_card("Passwords", "lock", passwords_text),
                        _count_card("Notes", "description", notes_text),
                    ]),
                    total_text,
                    ft.Divider(),
                    ft.Text("Top tags", size=18, weight=ft.FontWeight.BOLD),
                    tags_column,
                    ft.Divider(),
                    ft.Text("Top platforms", size=18, weight=ft.FontWeight.BOLD),
                    platforms_column,
                ], scroll=ft.ScrollMode.AUTO),
                padding=20, expand=True,
            ),
        ]
    )
