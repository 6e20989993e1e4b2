from tgmirror.main import create_app

app = create_app()


# === START ===
if __name__ == "__main__":
    port = app.extensions["tgmirror"].settings.port
    app.run(host="0.0.0.0", port=port)
