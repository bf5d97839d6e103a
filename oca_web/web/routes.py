## routes.py
from __future__ import annotations

from typing import List

from flask import (
    Blueprint,
    Response,
    abort,
    current_app,
    flash,
    jsonify,
    redirect,
    render_template,
    request,
    session,
    url_for,
)

from oca_web.config.ini_config import THEMES
from oca_web.domain.errors import (
    UNEXPECTED_FAILURE_MESSAGE,
    AnalysisError,
    FileReadError,
    SubmissionValidationError,
    UnsupportedFileTypeError,
)
from oca_web.domain.models import (
    AnalysisParams,
    AppStatus,
    BillingFile,
    CancelPayment,
    ProceedToPayment,
    Rerun,
    Reset,
    SelectTier,
    SetFiles,
    SubmitParameters,
)
from oca_web.domain.tiers import TIER_IDS, TIERS, find_tier
from oca_web.services.email_validation import email_problem
from oca_web.services.file_ingestion import ACCEPTED_MIME_TYPES, resolve_mime_type
from oca_web.services.report_sectionizer import render_sections

FLOW_KEY = "flow_id"
UPLOAD_FIELD = "billingFile[]"
REPORT_FILENAME = "cloud-cost-anomaly-report.md"
NOT_FOUND_MESSAGE = "Report not found or has expired."
TOO_LARGE_MESSAGE = "The uploaded file is too large."
API_PREFIX = "/server-api/"


def _read_uploads() -> List[BillingFile]:
    out: List[BillingFile] = []
    for fs in request.files.getlist(UPLOAD_FIELD):
        if not fs or not fs.filename:
            continue
        out.append(
            BillingFile(
                name=fs.filename,
                mime_type=resolve_mime_type(fs.filename, fs.mimetype),
                data=fs.read(),
            )
        )
    return out


def _form_params() -> AnalysisParams:
    return AnalysisParams(
        provider=(request.form.get("provider") or "").strip(),
        budget=(request.form.get("budget") or "").strip(),
        services=(request.form.get("services") or "").strip(),
    )


def create_blueprint(flows, analysis_service, report_repo, notifier, preferences, default_theme: str) -> Blueprint:
    bp = Blueprint("web", __name__)

    def current_flow():
        flow_id = session.get(FLOW_KEY)
        if not flow_id:
            flow_id = flows.new_id()
            session[FLOW_KEY] = flow_id
        return flows.get_or_create(flow_id)

    def current_theme() -> str:
        return preferences.get_theme() or default_theme

    def back_to_index():
        return redirect(url_for("web.index"))

    # -----------------------------
    # HTML flow
    # -----------------------------
    @bp.get("/")
    def index():
        flow = current_flow()
        state = flow.state

        share_id = (request.args.get("share") or "").strip()
        share_url = url_for("web.shared_report", report_id=share_id, _external=True) if share_id else None

        return render_template(
            "index.html",
            state=state,
            status=state.status.value,
            tiers=TIERS,
            current_tier=find_tier(state.selected_tier),
            accepted_types=", ".join(sorted(ACCEPTED_MIME_TYPES)),
            prefill=state.draft_params or state.last_analysis_params,
            status_message=flow.status_message(),
            progress=flow.progress_percent(),
            sections=render_sections(state.analysis_result) if state.status is AppStatus.COMPLETE else [],
            email_enabled=notifier.enabled,
            share_url=share_url,
            theme=current_theme(),
        )

    @bp.post("/parameters")
    def submit_parameters():
        flow = current_flow()

        # the main form carries tier and files along with the parameters
        tier = (request.form.get("tier") or "").strip()
        if tier:
            flow.dispatch(SelectTier(tier))
        files = _read_uploads()
        if files:
            flow.dispatch(SetFiles(tuple(files)))

        state = flow.dispatch(SubmitParameters(_form_params()))
        if state.validation_message:
            current_app.logger.info("Submission rejected: %s", state.validation_message)
        return back_to_index()

    @bp.post("/payment/cancel")
    def cancel_payment():
        current_flow().dispatch(CancelPayment())
        return back_to_index()

    @bp.post("/payment/proceed")
    def proceed_to_payment():
        current_flow().dispatch(ProceedToPayment())
        return back_to_index()

    @bp.post("/reset")
    def reset():
        current_flow().dispatch(Reset())
        return back_to_index()

    @bp.post("/rerun")
    def rerun():
        current_flow().dispatch(Rerun())
        return back_to_index()

    @bp.get("/status")
    def status():
        flow = current_flow()
        state = flow.state
        return jsonify(
            status=state.status.value,
            message=flow.status_message(),
            progress=flow.progress_percent(),
            error=state.error_message if state.status is AppStatus.ERROR else "",
        )

    @bp.get("/report.md")
    def download_report():
        state = current_flow().state
        if state.status is not AppStatus.COMPLETE:
            abort(404)
        return Response(
            state.analysis_result,
            mimetype="text/markdown",
            headers={"Content-Disposition": f"attachment; filename={REPORT_FILENAME}"},
        )

    @bp.post("/email")
    def email_report():
        state = current_flow().state
        if state.status is not AppStatus.COMPLETE:
            abort(404)
        if not notifier.enabled:
            flash("Email delivery is not configured.", "error")
            return back_to_index()

        recipient = (request.form.get("email") or "").strip()
        problem = email_problem(recipient) if recipient else "An email address is required."
        if problem:
            flash(problem, "error")
            return back_to_index()

        try:
            notifier.send_report(recipient, state.analysis_result)
        except Exception:
            current_app.logger.exception("Failed to email report")
            flash("Failed to send the report. Please try again later.", "error")
            return back_to_index()

        flash(f"Report sent to {recipient}. Please check your inbox.", "success")
        return back_to_index()

    @bp.post("/share")
    def share_report():
        state = current_flow().state
        if state.status is not AppStatus.COMPLETE:
            abort(404)
        report_id = report_repo.save(state.analysis_result)
        current_app.logger.info("Shared report %s", report_id)
        return redirect(url_for("web.index", share=report_id))

    @bp.get("/shared/<report_id>")
    def shared_report(report_id: str):
        text = report_repo.get(report_id)
        if text is None:
            return render_template("shared.html", sections=[], error=NOT_FOUND_MESSAGE, theme=current_theme()), 404
        return render_template("shared.html", sections=render_sections(text), error=None, theme=current_theme())

    @bp.post("/theme")
    def toggle_theme():
        requested = (request.form.get("theme") or "").strip().lower()
        if requested not in THEMES:
            requested = "light" if current_theme() == "dark" else "dark"
        preferences.set_theme(requested)
        return back_to_index()

    # -----------------------------
    # JSON API
    # -----------------------------
    @bp.get("/server-api/config")
    def api_config():
        return jsonify(emailEnabled=notifier.enabled)

    @bp.post("/server-api/analyze")
    def api_analyze():
        params = _form_params()
        tier = (request.form.get("tier") or "").strip()
        files = _read_uploads()

        if not params.is_complete() or not tier or not files:
            return jsonify(error="All fields and a file upload are required."), 400
        if tier not in TIER_IDS:
            return jsonify(error=f"Unknown plan: {tier}"), 400

        try:
            report = analysis_service.analyze(files, params)
        except (SubmissionValidationError, UnsupportedFileTypeError, FileReadError) as e:
            return jsonify(error=e.user_message), 400
        except AnalysisError as e:
            current_app.logger.warning("Analysis failed: %s", e.user_message)
            return jsonify(error=e.user_message), 502
        except Exception:
            current_app.logger.exception("Unexpected failure in /server-api/analyze")
            return jsonify(error=UNEXPECTED_FAILURE_MESSAGE), 500

        return jsonify(report=report)

    @bp.post("/server-api/share")
    def api_share():
        payload = request.get_json(silent=True) or {}
        content = payload.get("reportContent")
        if not isinstance(content, str) or not content.strip():
            return jsonify(error="Report content is required."), 400
        return jsonify(id=report_repo.save(content))

    @bp.get("/server-api/report/<report_id>")
    def api_report(report_id: str):
        text = report_repo.get(report_id)
        if text is None:
            return jsonify(error=NOT_FOUND_MESSAGE), 404
        return jsonify(reportContent=text)

    @bp.app_errorhandler(413)
    def too_large(_e):
        if request.path.startswith(API_PREFIX):
            return jsonify(error=TOO_LARGE_MESSAGE), 413
        flash(TOO_LARGE_MESSAGE, "error")
        return back_to_index()

    return bp
