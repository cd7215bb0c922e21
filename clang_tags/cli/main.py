import typer
from clang_tags.cli.build import build
from clang_tags.cli.query import app as query_app

app = typer.Typer(help="etags-style TAGS files for C/C++ trees, powered by libclang.")
app.command()(build)
app.add_typer(query_app, name="query")

if __name__ == '__main__':
    app()
