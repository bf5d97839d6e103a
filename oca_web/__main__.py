from oca_web.app_factory import create_app

if __name__ == "__main__":
    app = create_app()
    app.run(host=app.config["HOST"], port=app.config["PORT"], debug=app.config["DEBUG"])

#############################
#
# Key design patterns used
# •	Application Factory: create_app() builds the app and wires every collaborator.
# •	Dependency Injection (manual): ports are passed into the controller, services and blueprint.
# •	Reducer: state/flow.transition is a pure function over frozen ApplicationState + action dataclasses.
# •	Service Layer: AnalysisService turns uploads + parameters into one AI request.
# •	Repository: shared reports live behind ReportRepository (memory or SQL Server).
# •	Adapter: Gemini, SMTP, threading timers and the Flask session each sit behind a port.
######################################################################
# Runtime request flow
# •	GET /                      -> web.index renders index.html for the session's current status
# •	POST /parameters           -> SelectTier, SetFiles, SubmitParameters -> pendingPayment
# •	POST /payment/proceed      -> awaitingPaymentConfirmation, payment timer scheduled
# •	(timer fires)              -> analyzing, AnalysisService -> GeminiReportGenerator
# •	                           -> complete (report sectionized on render) or error
# •	GET /status                -> JSON polled while waiting
# •	POST /reset | /rerun       -> back to initial (rerun keeps the last parameters)
# ________________________________________
