import flet as ft

from securepass.client.context import AppContext
from securepass.client.manager import Notice, NoticeLevel

NAV_ITEMS = [
    ("/dashboard", "dashboard", "Dashboard"),
    ("/api-keys", "key", "API Keys"),
    ("/passwords", "lock", "Passwords"),
    ("/notes", "description", "Notes"),
]


def show_notices(page: ft.Page, notices: list[Notice]):
    for notice in notices:
        color = "red" if notice.level is NoticeLevel.ERROR else None
        page.open(ft.SnackBar(ft.Text(f"{notice.title}: {notice.message}", color=color)))


def app_bar(page: ft.Page, ctx: AppContext, title: str) -> ft.AppBar:
    def sign_out(e):
        ctx.provider.sign_out()

    identity = ctx.session.identity
    return ft.AppBar(
        title=ft.Text(title),
        bgcolor="surfaceVariant",
        actions=[
            *[
                ft.IconButton(icon=icon, tooltip=label, on_click=lambda e, r=route: page.go(r))
                for route, icon, label in NAV_ITEMS
            ],
            ft.Text(identity.email if identity else "", size=12, color="grey"),
            ft.IconButton(icon="logout", tooltip="Sign out", on_click=sign_out),
        ]
    )


def badge(text: str, bgcolor: str = "grey200", color: str = "black") -> ft.Container:
    return ft.Container(
        content=ft.Text(text, size=10, color=color),
        bgcolor=bgcolor,
        padding=ft.padding.symmetric(horizontal=6, vertical=2),
        border_radius=4
    )


def LoadingView(route: str) -> ft.View:
    return ft.View(
        route,
        controls=[
            ft.Container(
                content=ft.ProgressRing(),
                alignment=ft.alignment.center,
                expand=True
            )
        ]
    )
