from datetime import datetime
from flask import Blueprint, jsonify
from flask_login import login_user, logout_user, login_required, current_user
from ...errors import AuthError, ValidationError
from ...extensions import db
from ...models import User
from ...schemas import LoginRequest, RegisterRequest
from ..utils import parse_body

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.route("/register", methods=["POST"])
def register():
    data = parse_body(RegisterRequest)
    email = data.email.lower()
    if User.query.filter_by(email=email).first():
        raise ValidationError("Email already registered", details=[{"field": "email"}])
    user = User(name=data.name, email=email)
    user.set_password(data.password)
    db.session.add(user)
    db.session.commit()
    login_user(user)
    return jsonify(user.to_dict()), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    data = parse_body(LoginRequest)
    user = User.query.filter_by(email=data.email.lower()).first()
    if not user or not user.check_password(data.password):
        raise AuthError("Invalid credentials")
    user.last_signed_in = datetime.utcnow()
    db.session.commit()
    login_user(user)
    return jsonify(user.to_dict())


@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return jsonify({"success": True})


@auth_bp.route("/me")
def me():
    if not current_user.is_authenticated:
        return jsonify(None)
    return jsonify(current_user.to_dict())
