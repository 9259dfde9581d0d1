from currency_converter.cli import app

app(prog_name="currency-converter")
