from ghmcp.cli.app import entrypoint

if __name__ == "__main__":
    entrypoint()
