import flet as ft

from securepass.client.context import AppContext
from securepass.core.errors import AuthError


def LoginView(page: ft.Page, ctx: AppContext):
    is_sign_up_ref = {"value": False}

    title_text = ft.Text("Sign in to SecurePass", size=30, weight=ft.FontWeight.BOLD)
    sub_text = ft.Text("Enter your email and password.", color="grey", size=14)
    email_field = ft.TextField(label="Email", width=300, autofocus=True)
    pass_field = ft.TextField(
        label="Password",
        password=True,
        can_reveal_password=True,
        width=300,
        on_submit=lambda e: page.run_task(handle_auth_action)
    )
    error_text = ft.Text("", color="red")
    progress = ft.ProgressRing(width=20, height=20, visible=False)

    action_button = ft.ElevatedButton(
        text="Sign in",
        width=300,
        height=50,
        on_click=lambda e: page.run_task(handle_auth_action)
    )
    switch_button = ft.TextButton("No account yet? Sign up")

    def render_mode():
        if is_sign_up_ref["value"]:
            title_text.value = "Create your vault"
            sub_text.value = "Passwords need at least 6 characters."
            action_button.text = "Sign up"
            switch_button.text = "Already have an account? Sign in"
        else:
            title_text.value = "Sign in to SecurePass"
            sub_text.value = "Enter your email and password."
            action_button.text = "Sign in"
            switch_button.text = "No account yet? Sign up"
        error_text.value = ""
        page.update()

    def toggle_mode(e):
        is_sign_up_ref["value"] = not is_sign_up_ref["value"]
        render_mode()

    switch_button.on_click = toggle_mode

    async def handle_auth_action():
        email = (email_field.value or "").strip()
        password = pass_field.value or ""
        if not email or not password:
            error_text.value = "Email and password are required"
            error_text.update()
            return

        error_text.value = ""
        action_button.disabled = True
        progress.visible = True
        page.update()
        try:
            if is_sign_up_ref["value"]:
                await ctx.provider.sign_up(email, password)
            else:
                await ctx.provider.sign_in(email, password)
        except AuthError as ex:
            error_text.value = ex.message
        finally:
            action_button.disabled = False
            progress.visible = False
            page.update()
        # on success the session listener in main routes to the dashboard

    return ft.View(
        "/login",
        controls=[
            ft.Container(
                content=ft.Column(
                    [
                        ft.Icon(name="security", size=80, color="blue"),
                        ft.Container(height=20),
                        title_text,
                        sub_text,
                        ft.Container(height=30),
                        email_field,
                        pass_field,
                        error_text,
                        ft.Container(height=20),
                        ft.Row([action_button, progress], alignment=ft.MainAxisAlignment.CENTER),
                        switch_button,
                        ft.TextButton("Forgot password?", on_click=lambda e: page.go("/forgot-password")),
                    ],
                    horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                ),
                alignment=ft.alignment.center,
                expand=True
            )
        ]
    )


def ForgotPasswordView(page: ft.Page, ctx: AppContext):
    email_field = ft.TextField(label="Email", width=300)
    status_text = ft.Text("")
    code_field = ft.TextField(label="Reset code", width=300, multiline=True, max_lines=3)
    new_pass_field = ft.TextField(label="New password", password=True, can_reveal_password=True, width=300)
    confirm_text = ft.Text("")

    def set_status(text: ft.Text, message: str, ok: bool):
        text.value = message
        text.color = "green" if ok else "red"
        text.update()

    async def handle_reset():
        email = (email_field.value or "").strip()
        if not email:
            set_status(status_text, "Please enter a valid email address.", False)
            return
        try:
            message = await ctx.provider.request_password_reset(email)
        except AuthError as ex:
            set_status(status_text, ex.message, False)
        else:
            set_status(status_text, message, True)

    async def handle_confirm():
        code = (code_field.value or "").strip()
        password = new_pass_field.value or ""
        if not code or not password:
            set_status(confirm_text, "Reset code and new password are required", False)
            return
        try:
            message = await ctx.provider.confirm_password_reset(code, password)
        except AuthError as ex:
            set_status(confirm_text, ex.message, False)
        else:
            code_field.value = ""
            new_pass_field.value = ""
            set_status(confirm_text, message, True)
            page.update()

    return ft.View(
        "/forgot-password",
        controls=[
            ft.Container(
                content=ft.Column(
                    [
                        ft.Icon(name="lock_reset", size=80, color="blue"),
                        ft.Text("Reset your password", size=24, weight=ft.FontWeight.BOLD),
                        ft.Text("We will send a reset code to your email.", size=14, color="grey"),
                        ft.Container(height=20),
                        email_field,
                        status_text,
                        ft.ElevatedButton("Send reset code", on_click=lambda e: page.run_task(handle_reset), width=300, height=45),
                        ft.Divider(),
                        ft.Text("Already have a code?", weight=ft.FontWeight.BOLD),
                        code_field,
                        new_pass_field,
                        confirm_text,
                        ft.ElevatedButton("Set new password", on_click=lambda e: page.run_task(handle_confirm), width=300, height=45),
                        ft.TextButton("Back to sign in", on_click=lambda e: page.go("/login"))
                    ],
                    horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                    scroll=ft.ScrollMode.AUTO,
                ),
                alignment=ft.alignment.center,
                expand=True,
                padding=30
            )
        ]
    )
