from flask import Blueprint

reminder_bp = Blueprint("reminder", __name__, url_prefix="/reminders")
