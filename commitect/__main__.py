from commitect.cli.main import run

run()
