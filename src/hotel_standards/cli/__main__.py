from hotel_standards.cli import app

app()
