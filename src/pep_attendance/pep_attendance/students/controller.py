from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..cache.service import ALREADY_LOADING
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    cache = container.cache
    reports = container.report_service

    def _lookup_args():
        roll = (request.args.get("roll") or "").strip()
        name = (request.args.get("name") or "").strip()
        return roll or None, name or None

    def _not_loaded():
        if cache.snapshot is not None:
            return None
        message = "Data is still loading" if cache.is_loading else "No data yet"
        return jsonify({"error": message, "isLoading": cache.is_loading}), 503

    @app.route("/api/status", endpoint="api_status")
    def api_status():
        return jsonify(cache.get_status().to_dict())

    @app.route("/api/student", endpoint="api_student")
    def api_student():
        roll, name = _lookup_args()
        if not roll and not name:
            return jsonify({"error": "Please provide roll or name parameter"}), 400

        not_loaded = _not_loaded()
        if not_loaded:
            return not_loaded

        student = cache.get_student(roll=roll, name=name)
        if not student:
            return jsonify({"error": "Student not found"}), 404

        return jsonify(reports.student_response(student))

    @app.route("/api/students/search", endpoint="api_students_search")
    def api_students_search():
        roll, name = _lookup_args()
        if not roll and not name:
            return jsonify({"error": "Please provide roll or name parameter"}), 400

        not_loaded = _not_loaded()
        if not_loaded:
            return not_loaded

        students = cache.search(roll=roll, name=name)
        return jsonify({"students": [s.to_dict() for s in students], "count": len(students)})

    @app.route("/api/students/<roll>/history", endpoint="api_student_history")
    def api_student_history(roll: str):
        not_loaded = _not_loaded()
        if not_loaded:
            return not_loaded

        student = cache.find_by_roll(roll)
        if not student:
            return jsonify({"error": "Student not found"}), 404
        return jsonify(reports.attendance_history(student))

    @app.route("/api/admin/pending", endpoint="api_admin_pending")
    def api_admin_pending():
        not_loaded = _not_loaded()
        if not_loaded:
            return not_loaded

        return jsonify(reports.pending_report())

    @app.route("/api/refresh", methods=["GET", "POST"], endpoint="api_refresh")
    def api_refresh():
        outcome = cache.refresh()
        body = {**cache.get_status().to_dict(), "success": outcome.success, "error": outcome.error}
        if outcome.success:
            return jsonify(body)
        return jsonify(body), 409 if outcome.error == ALREADY_LOADING else 503

    @app.route("/api/cleanup", methods=["GET", "POST"], endpoint="api_cleanup")
    def api_cleanup():
        try:
            result = cache.run_cleanup()
        except Exception:
            logger.exception("Manual cleanup failed")
            return jsonify({"success": False, "error": "Failed to run cleanup"}), 500

        return jsonify(
            {
                "success": True,
                "message": "Cleanup completed successfully",
                "thisCleanup": result.to_dict(),
                "totalStats": cache.get_cleanup_stats().to_dict(),
            }
        )

    @app.route("/api/cleanup/stats", endpoint="api_cleanup_stats")
    def api_cleanup_stats():
        return jsonify(cache.get_cleanup_stats().to_dict())
