# users_ui/technician/technician_urls.py
from django.urls import path

from . import technician_views

app_name = "technician"

urlpatterns = [
    path("", technician_views.dashboard, name="dashboard"),
    path("reviews/", technician_views.reviews, name="reviews"),
]
