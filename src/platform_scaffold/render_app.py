from __future__ import annotations

import json

from src.platform_scaffold.context import ScaffoldContext

APP_PORT = 8080
HEALTH_PATH = "/healthz"


def render_dockerfile(_ctx: ScaffoldContext) -> str:
    # Must keep a non-root USER and a HEALTHCHECK: policy-gate check-dockerfile enforces both.
    return (
        "# --- Builder ---\n"
        "FROM node:20-alpine AS build\n"
        "WORKDIR /app\n"
        "COPY package*.json ./\n"
        "RUN npm ci --omit=dev\n"
        "COPY src ./src\n"
        "\n"
        "# --- Runtime ---\n"
        "FROM node:20-alpine\n"
        "WORKDIR /app\n"
        f"ENV NODE_ENV=production PORT={APP_PORT}\n"
        "RUN addgroup -S app && adduser -S -G app app\n"
        "COPY --from=build /app /app\n"
        "USER app\n"
        f"EXPOSE {APP_PORT}\n"
        "HEALTHCHECK --interval=30s --timeout=3s --start-period=10s \\\n"
        f"  CMD wget -qO- http://127.0.0.1:{APP_PORT}{HEALTH_PATH} || exit 1\n"
        'CMD ["node", "src/server.js"]\n'
    )


def render_package_json(_ctx: ScaffoldContext) -> str:
    doc = {
        "name": "sample-microservice",
        "version": "1.0.0",
        "private": True,
        "license": "MIT",
        "type": "module",
        "scripts": {"start": "node src/server.js"},
        "dependencies": {"express": "^4.19.2"},
    }
    return json.dumps(doc, indent=2) + "\n"


def render_server_js(_ctx: ScaffoldContext) -> str:
    return (
        'import express from "express";\n'
        "const app = express();\n"
        f'app.get("{HEALTH_PATH}", (_req, res) => res.status(200).json({{ ok: true }}));\n'
        'app.get("/", (_req, res) => res.send("hello from standardized microservice"));\n'
        f"const port = process.env.PORT || {APP_PORT};\n"
        "app.listen(port, () => console.log(`listening on ${port}`));\n"
    )
