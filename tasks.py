from invoke import task


@task
def lint(c):
    c.run("ruff check src tests")


@task
def format_check(c):
    c.run("ruff format --check src tests")


@task
def test(c):
    c.run("pytest")


@task
def demo(c, snapshot="ratings.json"):
    c.run(f"pairwise-rank rank {snapshot} -i alpha -i beta -i gamma --seed 1", pty=True)


@task
def ci(c):
    lint(c)
    format_check(c)
    test(c)
