from flask import Blueprint, current_app, g, jsonify

from jobboard.auth import clear_token_cookie, set_token_cookie, token_required
from jobboard.db import SessionLocal
from jobboard.errors import Unauthorized
from jobboard.models.user import User
from jobboard.routes import json_body
from jobboard.services import auth_service

bp = Blueprint("users", __name__, url_prefix="/api/users")


@bp.post("/register")
def register():
    """
    Register User
    ---
    tags: [Users]
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [name, email, password]
          properties:
            name: { type: string, minLength: 2 }
            email: { type: string, format: email }
            password: { type: string, minLength: 6 }
    responses:
      201:
        description: Registered
        schema:
          type: object
          properties:
            message: { type: string }
            userId: { type: integer }
      400:
        description: Validation error
      409:
        description: Email already in use
    """
    data = json_body()
    with SessionLocal() as s:
        user = auth_service.register(
            s,
            data.get("name"),
            data.get("email"),
            data.get("password"),
            rounds=current_app.config["BCRYPT_ROUNDS"],
        )
        return jsonify({"message": "User registered successfully", "userId": user.id}), 201


@bp.post("/login")
def login():
    """
    Log In
    ---
    tags: [Users]
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [email, password]
          properties:
            email: { type: string, format: email }
            password: { type: string }
    responses:
      200:
        description: Logged in; the token is also set as an HttpOnly cookie
        schema:
          type: object
          properties:
            message: { type: string }
            token: { type: string }
            user:
              $ref: '#/definitions/User'
      400:
        description: Invalid credentials or validation error
    definitions:
      User:
        type: object
        properties:
          id: { type: integer }
          name: { type: string }
          email: { type: string }
          role: { type: string, enum: [user, admin] }
    """
    data = json_body()
    config = current_app.config
    with SessionLocal() as s:
        token, user = auth_service.login(
            s,
            data.get("email"),
            data.get("password"),
            secret=config["JWT_SECRET"],
            expires_in=config["JWT_EXPIRES_SECONDS"],
            rounds=config["BCRYPT_ROUNDS"],
        )
        body = {"message": "Login successful", "token": token, "user": auth_service.user_to_dict(user)}

    response = jsonify(body)
    set_token_cookie(response, token)
    return response


@bp.post("/logout")
def logout():
    """
    Log Out
    ---
    tags: [Users]
    responses:
      200:
        description: Session cookie cleared
    """
    response = jsonify({"message": "Logged out successfully"})
    clear_token_cookie(response)
    return response


@bp.get("/me")
@token_required
def me():
    """
    Current User
    ---
    tags: [Users]
    security:
      - bearerAuth: []
    responses:
      200:
        description: The user the token belongs to
        schema:
          type: object
          properties:
            user:
              $ref: '#/definitions/User'
      401:
        description: Missing, invalid or expired token
    """
    with SessionLocal() as s:
        user = s.get(User, g.user["id"])
        if user is None:
            raise Unauthorized("Invalid or expired token")
        return jsonify({"user": auth_service.user_to_dict(user)})
