from django.urls import path

from .views import CheckEmailView, LogoutView, RegisterCustomerView, SessionView, WordPressLoginView

app_name = "accounts"

urlpatterns = [
    path("check-email", CheckEmailView.as_view(), name="check-email"),
    path("wordpress", WordPressLoginView.as_view(), name="wordpress-login"),
    path("session", SessionView.as_view(), name="session"),
    path("logout", LogoutView.as_view(), name="logout"),
    path("register-customer", RegisterCustomerView.as_view(), name="register-customer"),
]
