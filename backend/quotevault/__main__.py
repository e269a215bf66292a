from quotevault.main import run

run()
