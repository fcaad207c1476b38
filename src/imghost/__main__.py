from imghost.cli import run

run()
