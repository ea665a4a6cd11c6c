"""Hello World — the simplest wren app.

Demonstrates routes, path parameters, constraints, a prefix scope,
Response chaining, and a custom not-found hook.

Run:
    python app.py
"""

from wren import App, Response, Router

router = Router()


@router.route("/")
def index():
    return "Hello, World!"


@router.route("/greet/{name}")
def greet(name: str):
    return f"Hello, {name}!"


router.get("/posts/{year}", lambda year: f"Posts from {year}").where("year", r"\d{4}")


def api(r: Router) -> None:
    r.get("/status", lambda: "ok")
    r.add("/echo/{word}", lambda word: word, ["GET", "POST"])


router.scope("/api", api)


@router.route("/custom")
def custom():
    return Response("Created").with_status(201).with_header("X-Custom", "wren")


@router.on_path_not_found
def not_found(path: str):
    return f"Nothing at {path}"


app = App(router)

if __name__ == "__main__":
    app.run()
