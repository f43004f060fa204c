import logging
import flet as ft

from securepass.logging_config import configure_logging
from .config import get_client_settings
from .context import RECORD_ROUTES, AppContext
from .identity import IdentityState
from .views.common import LoadingView
from .views.dashboard import DashboardView
from .views.login import ForgotPasswordView, LoginView
from .views.records import RecordsView

logger = logging.getLogger(__name__)

PUBLIC_ROUTES = ("/login", "/forgot-password")
HOME_ROUTE = "/dashboard"


def main(page: ft.Page):
    settings = get_client_settings()
    ctx = AppContext.create(settings)

    page.title = "SecurePass"
    page.theme_mode = ft.ThemeMode.LIGHT

    def release_views():
        for view in page.views:
            if callable(view.data):
                view.data()

    def route_change(route):
        logger.debug("Route -> %s", page.route)
        page.overlay.clear()
        release_views()
        page.views.clear()

        session = ctx.session
        if session.is_loading:
            page.views.append(LoadingView(page.route))
        elif session.is_absent and page.route not in PUBLIC_ROUTES:
            page.go("/login")
            return
        elif not session.is_absent and page.route in PUBLIC_ROUTES:
            page.go(HOME_ROUTE)
            return
        elif page.route == "/login":
            page.views.append(LoginView(page, ctx))
        elif page.route == "/forgot-password":
            page.views.append(ForgotPasswordView(page, ctx))
        elif page.route in RECORD_ROUTES:
            page.views.append(RecordsView(page, ctx, RECORD_ROUTES[page.route], page.route))
        else:
            page.views.append(DashboardView(page, ctx))
        page.update()

    def view_pop(view):
        if len(page.views) > 1:
            page.views.pop()
            page.go(page.views[-1].route or HOME_ROUTE)
        else:
            route_change(page.route)

    def show(route: str):
        # page.go does not fire on_route_change for the current route
        if route == page.route:
            route_change(route)
        else:
            page.go(route)

    def on_session_change(state: IdentityState, previous: IdentityState):
        if state.is_loading:
            route_change(page.route)
        elif state.is_absent:
            show("/login" if page.route not in PUBLIC_ROUTES else page.route)
        elif previous.identity != state.identity:
            show(HOME_ROUTE if page.route in PUBLIC_ROUTES else page.route)

    def on_disconnect(e):
        ctx.close()

    page.on_route_change = route_change
    page.on_view_pop = view_pop
    page.on_disconnect = on_disconnect

    ctx.session.add_listener(on_session_change)
    ctx.session.open()
    page.go(HOME_ROUTE)
    page.run_task(ctx.provider.start)


def run():
    configure_logging(get_client_settings().LOG_LEVEL)
    ft.app(target=main)


if __name__ == "__main__":
    run()
