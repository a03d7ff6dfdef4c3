from footprints import create_app, run_startup_bootstrap

app = create_app()
# With preload_app the master loads once before forking; otherwise each worker
# races here and the load marker lets exactly one of them insert.
run_startup_bootstrap(app)


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=bool(app.config.get("DEBUG")))
