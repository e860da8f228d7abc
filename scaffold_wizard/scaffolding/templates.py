"""File templates for the Add Docker Files wizard.

Templates are plain text with {service_name} and {port} placeholders.
Nothing here parses Dockerfile or Compose syntax.
"""

import re
from typing import Any, Mapping, Optional

from scaffold_wizard.engine.context import interpolate

NODE = 'Node.js'
PYTHON = 'Python: General'
GO = 'Go'
DOTNET = '.NET: ASP.NET Core'
OTHER = 'Other'

PLATFORMS = [NODE, PYTHON, GO, DOTNET, OTHER]

DEFAULT_PORTS = {
    NODE: 3000,
    PYTHON: 8000,
    GO: 3000,
    DOTNET: 8080,
    OTHER: None,
}

DOCKERFILE = 'Dockerfile'
DOCKERIGNORE = '.dockerignore'
COMPOSE_FILE = 'docker-compose.yml'

DOCKERFILES = {
    NODE: """FROM node:lts-alpine
ENV NODE_ENV=production
WORKDIR /usr/src/app
COPY ["package.json", "package-lock.json*", "npm-shrinkwrap.json*", "./"]
RUN npm install --production --silent && mv node_modules ../
COPY . .
EXPOSE {port}
RUN chown -R node /usr/src/app
USER node
CMD ["npm", "start"]
""",
    PYTHON: """FROM python:3-slim

EXPOSE {port}

# Keeps Python from generating .pyc files in the container
ENV PYTHONDONTWRITEBYTECODE=1

# Turns off buffering for easier container logging
ENV PYTHONUNBUFFERED=1

COPY requirements.txt .
RUN python -m pip install -r requirements.txt

WORKDIR /app
COPY . /app

RUN adduser -u 5678 --disabled-password --gecos "" appuser && chown -R appuser /app
USER appuser

CMD ["python", "app.py"]
""",
    GO: """FROM golang:alpine AS builder
RUN apk add --no-cache git
WORKDIR /go/src/app
COPY . .
RUN go get -d -v ./...
RUN go build -o /go/bin/app -v ./...

FROM alpine:latest
RUN apk --no-cache add ca-certificates
COPY --from=builder /go/bin/app /app
ENTRYPOINT ["/app"]
LABEL Name={service_name} Version=0.0.1
EXPOSE {port}
""",
    DOTNET: """FROM mcr.microsoft.com/dotnet/aspnet:8.0 AS base
WORKDIR /app
EXPOSE {port}

FROM mcr.microsoft.com/dotnet/sdk:8.0 AS build
WORKDIR /src
COPY . .
RUN dotnet restore
RUN dotnet publish -c Release -o /app/publish

FROM base AS final
WORKDIR /app
COPY --from=build /app/publish .
ENTRYPOINT ["dotnet", "{service_name}.dll"]
""",
    OTHER: """FROM docker/whalesay:latest
LABEL Name={service_name} Version=0.0.1
RUN apt-get -y update && apt-get install -y fortunes
CMD ["sh", "-c", "/usr/games/fortune -a | cowsay"]
""",
}

DOCKERIGNORE_COMMON = """**/.classpath
**/.dockerignore
**/.env
**/.git
**/.gitignore
**/.project
**/.settings
**/.toolstarget
**/.vs
**/.vscode
**/*.*proj.user
**/*.dbmdl
**/*.jfm
**/bin
**/charts
**/docker-compose*
**/compose*
**/Dockerfile*
**/node_modules
**/npm-debug.log
**/obj
**/secrets.dev.yaml
**/values.dev.yaml
LICENSE
README.md
"""

DOCKERIGNORE_EXTRA = {
    PYTHON: """**/__pycache__
**/.venv
**/*.pyc
""",
}


def service_name_for(folder: str) -> str:
    """Lowercase, compose-safe name derived from a folder path."""
    base = re.split(r'[\\/]', folder.rstrip('/\\'))[-1]
    name = re.sub(r'[^a-z0-9_.-]+', '-', base.lower()).strip('-.')
    return name or 'app'


def check_platform(platform: str) -> str:
    if platform not in PLATFORMS:
        raise ValueError(f"Unsupported platform: {platform}")
    return platform


def _compose(service_name: str, port: Optional[int]) -> str:
    lines = [
        "services:",
        f"  {service_name}:",
        f"    image: {service_name}",
        "    build:",
        "      context: .",
        "      dockerfile: ./Dockerfile",
    ]
    if port:
        lines += ["    ports:", f"      - {port}:{port}"]
    return "\n".join(lines) + "\n"


def render(file_name: str, platform: str, ctx: Mapping[str, Any]) -> str:
    """Render one scaffold file for a platform.

    Raises:
        ValueError: For an unknown platform or file name
    """
    check_platform(platform)

    service_name = ctx.get('service_name') or service_name_for(str(ctx.get('workspace_folder', '')))
    port = ctx.get('port') or DEFAULT_PORTS[platform]

    if file_name == DOCKERFILE:
        return interpolate(DOCKERFILES[platform], {'service_name': service_name, 'port': port})
    if file_name == DOCKERIGNORE:
        return DOCKERIGNORE_COMMON + DOCKERIGNORE_EXTRA.get(platform, '')
    if file_name == COMPOSE_FILE:
        return _compose(service_name, port)

    raise ValueError(f"No template for {file_name}")
