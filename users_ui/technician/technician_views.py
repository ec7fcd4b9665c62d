# users_ui/technician/technician_views.py
import logging

from core import queries
from core.helpers import format_rupiah, average_rating_display
from users_ui.base_views import role_view, read_or_error

logger = logging.getLogger(__name__)


@role_view("TECHNICIAN", template_name="technician/dashboard.html")
def dashboard(request):
    """Job/earning totals from the profile; rating from the review service."""
    session_user = request.session_user
    token = session_user.token

    profile, profile_error = read_or_error(lambda: queries.get_profile(token), default=session_user.profile)
    technician_id = profile.id if profile else session_user.id

    if technician_id:
        rating, rating_error = read_or_error(lambda: queries.get_technician_rating(token, technician_id))
    else:
        rating, rating_error = None, "Rating unavailable: your technician profile could not be loaded."
    if rating_error:
        logger.info("Rating unavailable for technician %s: %s", technician_id, rating_error)

    return {
        "profile": profile,
        "profile_error": profile_error,
        "jobs_completed": profile.totalJobsCompleted if profile else 0,
        "earnings_display": format_rupiah(profile.totalEarnings if profile else 0),
        "experience": (profile.experience or 0) if profile else 0,
        "rating": rating,
        "average_rating": average_rating_display(rating.averageRating if rating else 0),
        "total_reviews": rating.totalReviews if rating else 0,
        "rating_error": rating_error,
    }


@role_view("TECHNICIAN", template_name="technician/reviews.html")
def reviews(request):
    items, error = read_or_error(lambda: queries.get_technician_reviews(request.session_user.token), default=[])
    average = sum(r.rating for r in items) / len(items) if items else 0
    return {
        "reviews": items,
        "error": error,
        "average_rating": average_rating_display(average),
    }
