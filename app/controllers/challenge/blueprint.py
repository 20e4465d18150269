from flask import Blueprint

challenge_bp = Blueprint("challenge", __name__, url_prefix="/challenges")
