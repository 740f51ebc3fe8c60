from flask import Blueprint, current_app
from flask_login import login_user, logout_user, login_required, current_user
from sqlalchemy import or_
from ...errors import AuthenticationError, ConflictError, ValidationError
from ...extensions import db
from ...models import User
from ...responses import success
from ...validators import json_body, validate_registration

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.route("/register", methods=["POST"])
def register():
    cleaned, errors = validate_registration(json_body())
    if errors:
        raise ValidationError(errors=errors)
    taken = User.query.filter(
        or_(User.username == cleaned["username"], User.email == cleaned["email"])
    ).first()
    if taken:
        raise ConflictError("Username or email already registered")
    password = cleaned.pop("password")
    user = User(**cleaned)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    login_user(user)
    current_app.logger.info("Registered user %s", user.id)
    return success({"user": user.to_dict()}, "Registration successful", 201)


@auth_bp.route("/login", methods=["POST"])
def login():
    data = json_body()
    if any(not isinstance(data.get(key), (str, type(None))) for key in ("username", "email", "password")):
        raise ValidationError("Username and password must be strings")
    identifier = (data.get("username") or data.get("email") or "").strip()
    password = data.get("password") or ""
    if not identifier or not password:
        raise ValidationError("Username and password are required")
    user = User.query.filter(
        or_(User.username == identifier, User.email == identifier.lower())
    ).first()
    if user is None or not user.check_password(password):
        current_app.logger.warning("Failed login for %r", identifier)
        raise AuthenticationError("Invalid credentials")
    login_user(user)
    return success({"user": user.to_dict()}, "Logged in successfully")


@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return success(message="Logged out")


@auth_bp.route("/me")
@login_required
def me():
    return success({"user": current_user.to_dict()})
