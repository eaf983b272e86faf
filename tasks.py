from invoke import task


@task
def lint(c):
    c.run("ruff check .")


@task
def format_check(c):
    c.run("ruff format --check .")


@task
def test(c):
    c.run("pytest")


@task
def serve(c, config="config.example.yaml"):
    c.run(f"faceoff serve --config {config}")


@task
def seed(c):
    c.run("python scripts/seed_demo.py")


@task
def ci(c):
    lint(c)
    format_check(c)
    test(c)
