from http_screenshotter.cli.app import app

app()
