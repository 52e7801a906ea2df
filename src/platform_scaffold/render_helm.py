"""Helm chart sources.

Go template braces are emitted as plain (non f-string) literals; only the chart
name is substituted, and always through ``_include`` so the helper names in
``_helpers.tpl`` and the templates stay in sync.
"""

from __future__ import annotations

from src.platform_scaffold.context import ScaffoldContext
from src.platform_scaffold.render_app import APP_PORT, HEALTH_PATH


def _include(ctx: ScaffoldContext, helper: str) -> str:
    return '{{ include "' + ctx.chart_name + "." + helper + '" . }}'


def render_chart_yaml(ctx: ScaffoldContext) -> str:
    return (
        "apiVersion: v2\n"
        f"name: {ctx.chart_name}\n"
        "description: Standardized microservice chart (dry-run render only)\n"
        "type: application\n"
        "version: 0.1.0\n"
        'appVersion: "1.0.0"\n'
    )


def render_values_yaml(_ctx: ScaffoldContext) -> str:
    return (
        "replicaCount: 2\n"
        "\n"
        "image:\n"
        "  repository: local/app\n"
        "  tag: dev\n"
        "  pullPolicy: IfNotPresent\n"
        "\n"
        "service:\n"
        "  type: ClusterIP\n"
        "  port: 80\n"
        "\n"
        "resources:\n"
        "  requests:\n"
        "    cpu: 50m\n"
        "    memory: 64Mi\n"
        "  limits:\n"
        "    cpu: 250m\n"
        "    memory: 256Mi\n"
        "\n"
        "podSecurityContext:\n"
        "  runAsNonRoot: true\n"
        "  runAsUser: 10001\n"
        "\n"
        "containerSecurityContext:\n"
        "  allowPrivilegeEscalation: false\n"
        "  readOnlyRootFilesystem: true\n"
        "\n"
        "livenessProbe:\n"
        f"  path: {HEALTH_PATH}\n"
        "  initialDelaySeconds: 10\n"
        "  periodSeconds: 30\n"
        "\n"
        "readinessProbe:\n"
        f"  path: {HEALTH_PATH}\n"
        "  initialDelaySeconds: 5\n"
        "  periodSeconds: 10\n"
    )


def render_deployment_yaml(ctx: ScaffoldContext) -> str:
    name = _include(ctx, "name")
    return (
        "apiVersion: apps/v1\n"
        "kind: Deployment\n"
        "metadata:\n"
        f"  name: {_include(ctx, 'fullname')}\n"
        "  labels:\n"
        f"    app.kubernetes.io/name: {name}\n"
        "spec:\n"
        "  replicas: {{ .Values.replicaCount }}\n"
        "  strategy:\n"
        "    type: RollingUpdate\n"
        "    rollingUpdate:\n"
        "      maxUnavailable: 0\n"
        "      maxSurge: 1\n"
        "  selector:\n"
        "    matchLabels:\n"
        f"      app.kubernetes.io/name: {name}\n"
        "  template:\n"
        "    metadata:\n"
        "      labels:\n"
        f"        app.kubernetes.io/name: {name}\n"
        "    spec:\n"
        "      securityContext:\n"
        "        runAsNonRoot: {{ .Values.podSecurityContext.runAsNonRoot }}\n"
        "        runAsUser: {{ .Values.podSecurityContext.runAsUser }}\n"
        "      containers:\n"
        "        - name: app\n"
        '          image: "{{ .Values.image.repository }}:{{ .Values.image.tag }}"\n'
        "          imagePullPolicy: {{ .Values.image.pullPolicy }}\n"
        "          ports:\n"
        f"            - containerPort: {APP_PORT}\n"
        "              name: http\n"
        "          livenessProbe:\n"
        "            httpGet:\n"
        "              path: {{ .Values.livenessProbe.path }}\n"
        f"              port: {APP_PORT}\n"
        "            initialDelaySeconds: {{ .Values.livenessProbe.initialDelaySeconds }}\n"
        "            periodSeconds: {{ .Values.livenessProbe.periodSeconds }}\n"
        "          readinessProbe:\n"
        "            httpGet:\n"
        "              path: {{ .Values.readinessProbe.path }}\n"
        f"              port: {APP_PORT}\n"
        "            initialDelaySeconds: {{ .Values.readinessProbe.initialDelaySeconds }}\n"
        "            periodSeconds: {{ .Values.readinessProbe.periodSeconds }}\n"
        "          securityContext:\n"
        "            allowPrivilegeEscalation: {{ .Values.containerSecurityContext.allowPrivilegeEscalation }}\n"
        "            readOnlyRootFilesystem: {{ .Values.containerSecurityContext.readOnlyRootFilesystem }}\n"
        "          resources:\n"
        "{{- toYaml .Values.resources | nindent 12 }}\n"
    )


def render_service_yaml(ctx: ScaffoldContext) -> str:
    return (
        "apiVersion: v1\n"
        "kind: Service\n"
        "metadata:\n"
        f"  name: {_include(ctx, 'fullname')}\n"
        "spec:\n"
        "  selector:\n"
        f"    app.kubernetes.io/name: {_include(ctx, 'name')}\n"
        "  ports:\n"
        "    - name: http\n"
        "      port: {{ .Values.service.port }}\n"
        f"      targetPort: {APP_PORT}\n"
        "  type: {{ .Values.service.type }}\n"
    )


def render_helpers_tpl(ctx: ScaffoldContext) -> str:
    return (
        '{{- define "' + ctx.chart_name + '.name" -}}\n'
        '{{- default .Chart.Name .Values.nameOverride | trunc 63 | trimSuffix "-" -}}\n'
        "{{- end -}}\n"
        "\n"
        '{{- define "' + ctx.chart_name + '.fullname" -}}\n'
        '{{- printf "%s-%s" .Release.Name (include "'
        + ctx.chart_name
        + '.name" .) | trunc 63 | trimSuffix "-" -}}\n'
        "{{- end -}}\n"
    )
