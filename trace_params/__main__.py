from trace_params.cli import run

if __name__ == "__main__":
    run()
