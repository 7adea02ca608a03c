from flask import Blueprint, jsonify, request

from crudkeys.employee.repository import EmployeeRepository
from crudkeys.idgen import GenerationExhausted

bp = Blueprint("employees", __name__)

employee_repo = EmployeeRepository()


def parse_name(data: dict):
    """Return the stripped name from a request body, or None if it is not a usable string."""
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    return name.strip()


@bp.route("", methods=["GET"])
def list_employees():
    """List all employees."""
    return jsonify(employee_repo.list())


@bp.route("", methods=["POST"])
def create_employee():
    """Create a new employee with a generated key."""
    data = request.get_json(silent=True) or {}
    name = parse_name(data)
    if name is None:
        return jsonify({"error": "name is required"}), 400

    try:
        employee = employee_repo.create(name=name)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except GenerationExhausted as e:
        return jsonify({"error": str(e)}), 503

    return jsonify(employee), 201


@bp.route("/<int:employee_id>", methods=["GET"])
def get_employee(employee_id: int):
    """Get employee by ID."""
    employee = employee_repo.get_by_id(employee_id)
    if not employee:
        return jsonify({"error": "Employee not found"}), 404
    return jsonify(employee)


@bp.route("/<int:employee_id>", methods=["PUT"])
def update_employee(employee_id: int):
    """Rename an employee."""
    data = request.get_json(silent=True) or {}
    name = parse_name(data)
    if name is None:
        return jsonify({"error": "name is required"}), 400

    try:
        employee = employee_repo.update(employee_id, name=name)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    if not employee:
        return jsonify({"error": "Employee not found"}), 404
    return jsonify(employee)


@bp.route("/<int:employee_id>", methods=["DELETE"])
def delete_employee(employee_id: int):
    """Delete an employee."""
    if not employee_repo.delete(employee_id):
        return jsonify({"error": "Employee not found"}), 404
    return "", 204
