from docqa.cli.main import app

app()
