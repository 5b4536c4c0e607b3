from __future__ import annotations

from typing import Any, Dict

from flask import Blueprint, jsonify, request

from jobboard.auth import admin_required
from jobboard.db import SessionLocal
from jobboard.models.job import Job
from jobboard.routes import json_body
from jobboard.security import job_write_limit
from jobboard.services import job_service

bp = Blueprint("jobs", __name__, url_prefix="/api/jobs")


def _to_dict(j: Job) -> Dict[str, Any]:
    return {
        "id": j.id,
        "type": j.type,
        "title": j.title,
        "description": j.description,
        "salary": j.salary,
        "location": j.location,
        "company_name": j.company_name,
        "company_description": j.company_description,
        "contact_email": j.contact_email,
        "contact_phone": j.contact_phone,
        "created_at": j.created_at.strftime("%Y-%m-%d %H:%M:%S") if j.created_at else None,
    }


@bp.get("")
def list_jobs():
    """
    List Jobs
    ---
    tags: [Jobs]
    parameters:
      - name: search
        in: query
        type: string
        required: false
        description: Case-insensitive match on title, description, location, company or type
      - name: page
        in: query
        type: integer
        required: false
      - name: limit
        in: query
        type: integer
        required: false
        description: Page size (max 100). Supplying page or limit switches to the envelope shape.
    responses:
      200:
        description: A bare list of jobs, or a paginated envelope when page/limit is given
        schema:
          type: object
          properties:
            jobs:
              type: array
              items:
                $ref: '#/definitions/Job'
            total: { type: integer }
            page: { type: integer }
            limit: { type: integer }
            total_pages: { type: integer }
      400:
        description: Invalid page or limit
    definitions:
      Job:
        type: object
        properties:
          id: { type: integer }
          type: { type: string, enum: [Full-Time, Part-Time, Remote, Internship, Contract] }
          title: { type: string }
          description: { type: string }
          salary: { type: string }
          location: { type: string }
          company_name: { type: string }
          company_description: { type: string }
          contact_email: { type: string }
          contact_phone: { type: string }
          created_at: { type: string }
    """
    with SessionLocal() as s:
        result = job_service.list_jobs(
            s,
            search=request.args.get("search", type=str),
            page=request.args.get("page"),
            limit=request.args.get("limit"),
        )
        jobs = [_to_dict(j) for j in result.items]

    if not result.paginated:
        return jsonify(jobs)
    return jsonify({
        "jobs": jobs,
        "total": result.total,
        "page": result.page,
        "limit": result.limit,
        "total_pages": result.total_pages,
    })


@bp.get("/<int:job_id>")
def get_job(job_id: int):
    """
    Get Job by ID
    ---
    tags: [Jobs]
    parameters:
      - name: job_id
        in: path
        type: integer
        required: true
    responses:
      200:
        description: Job
        schema:
          $ref: '#/definitions/Job'
      404:
        description: Job not found
    """
    with SessionLocal() as s:
        return jsonify(_to_dict(job_service.get_job(s, job_id)))


@bp.post("")
@job_write_limit
@admin_required
def create_job():
    """
    Create Job (admin only)
    ---
    tags: [Jobs]
    security:
      - bearerAuth: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          $ref: '#/definitions/JobInput'
    responses:
      201:
        description: Created
        schema:
          type: object
          properties:
            id: { type: integer }
            message: { type: string }
      400:
        description: Validation error
      401:
        description: Missing, invalid or expired token
      403:
        description: Admin access required
    definitions:
      JobInput:
        type: object
        required: [type, title, location, contact_email]
        properties:
          type: { type: string, enum: [Full-Time, Part-Time, Remote, Internship, Contract] }
          title: { type: string, minLength: 3, maxLength: 100 }
          description: { type: string, maxLength: 5000 }
          salary: { type: string, maxLength: 100 }
          location: { type: string, minLength: 2, maxLength: 100 }
          company_name: { type: string, maxLength: 100 }
          company_description: { type: string, maxLength: 2000 }
          contact_email: { type: string, format: email }
          contact_phone: { type: string, minLength: 7, maxLength: 20 }
    """
    payload = json_body()
    with SessionLocal() as s:
        job = job_service.create_job(s, payload)
        return jsonify({"id": job.id, "message": "Job created successfully"}), 201


@bp.put("/<int:job_id>")
@job_write_limit
@admin_required
def update_job(job_id: int):
    """
    Update Job (admin only)
    ---
    tags: [Jobs]
    security:
      - bearerAuth: []
    parameters:
      - name: job_id
        in: path
        type: integer
        required: true
      - in: body
        name: body
        required: true
        schema:
          $ref: '#/definitions/JobInput'
    responses:
      200:
        description: Updated
      400:
        description: Validation error
      401:
        description: Missing, invalid or expired token
      403:
        description: Admin access required
      404:
        description: Job not found
    """
    payload = json_body()
    with SessionLocal() as s:
        job_service.update_job(s, job_id, payload)
    return jsonify({"message": "Job updated successfully"})


@bp.delete("/<int:job_id>")
@job_write_limit
@admin_required
def delete_job(job_id: int):
    """
    Delete Job (admin only)
    ---
    tags: [Jobs]
    security:
      - bearerAuth: []
    parameters:
      - name: job_id
        in: path
        type: integer
        required: true
    responses:
      200:
        description: Deleted
      401:
        description: Missing, invalid or expired token
      403:
        description: Admin access required
      404:
        description: Job not found
    """
    with SessionLocal() as s:
        job_service.delete_job(s, job_id)
    return jsonify({"message": "Job deleted successfully"})
