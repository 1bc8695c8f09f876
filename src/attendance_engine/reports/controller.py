from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import arg_date, arg_month
from ..container import Container


def register(app: Flask, container: Container) -> None:
    reports = container.report_service

    def _today():
        return container.clock().date()

    @app.route("/api/reports/payroll", methods=["GET"], endpoint="api_report_payroll")
    def api_report_payroll():
        table = reports.payroll_table(arg_month(_today()))
        return jsonify({
            "success": True,
            "month": table.month.strftime("%Y-%m"),
            "rows": table.rows,
            "summary": table.summary.to_dict(),
        })

    @app.route("/api/reports/kpis", methods=["GET"], endpoint="api_report_kpis")
    def api_report_kpis():
        return jsonify({"success": True, "tiles": reports.kpi_tiles(arg_month(_today()))})

    @app.route("/api/reports/salary-chart", methods=["GET"], endpoint="api_report_salary_chart")
    def api_report_salary_chart():
        limit = request.args.get("limit", type=int)
        in_thousands = request.args.get("thousands", "0") in {"1", "true", "yes"}
        points = reports.salary_chart(arg_month(_today()), limit=limit, in_thousands=in_thousands)
        return jsonify({"success": True, "points": points})

    @app.route("/api/reports/today", methods=["GET"], endpoint="api_report_today")
    def api_report_today():
        return jsonify({"success": True, "overview": reports.today_overview(arg_date("date", _today()))})

    @app.route("/api/reports/payroll.csv", methods=["GET"], endpoint="api_report_payroll_csv")
    def api_report_payroll_csv():
        month = arg_month(_today())
        csv_bytes = reports.payroll_csv(month).encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename=payroll-mis-{month.strftime('%Y-%m')}.csv"},
        )

    @app.route("/api/workers/<int:worker_id>/accrual", methods=["GET"], endpoint="api_worker_accrual")
    def api_worker_accrual(worker_id: int):
        accrual = container.payroll_service.accrual_for_worker(worker_id, arg_month(_today()))
        return jsonify({"success": True, "accrual": accrual.to_row()})
