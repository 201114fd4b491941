"""
Command Line Interface for the multi-tenant admin console control plane
Provides commands to manage tenants, plans, users, audit history and usage analytics
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional, Tuple

import click

from src.control_plane import ApiError, build_control_plane
from src.control_plane.config import load_config
from src.control_plane.models import PlatformRole, TenantStatus
from src.control_plane.schemas import (
    AuditQuery, CreateTenantRequest, TenantQuery, UpdateEntitlementsRequest, UserQuery,
    validate_create_request
)
from src.control_plane.usage_tracker import breakdown_day

STATUS_ICONS = {
    TenantStatus.PROVISIONING.value: "⏳",
    TenantStatus.READY.value: "✅",
    TenantStatus.SUSPENDED.value: "⏸️ ",
    TenantStatus.DELETING.value: "🗑️ ",
    TenantStatus.ERROR.value: "❌",
}


def parse_entitlement(raw: str) -> Tuple[str, Any]:
    """Parse ``key=value``; numeric values become int or float"""
    if "=" not in raw:
        raise click.BadParameter(f"Expected key=value, got {raw!r}")
    key, value = raw.split("=", 1)
    for cast in (int, float):
        try:
            return key, cast(value)
        except ValueError:
            continue
    return key, value


def run_call(ctx, coro):
    """Await a control plane call, reporting typed errors instead of tracebacks"""
    try:
        return asyncio.run(coro)
    except ApiError as e:
        click.echo(f"❌ {e.code} ({e.status}): {e.message}")
        if e.details:
            click.echo(f"   Details: {json.dumps(e.details)}")
        ctx.exit(1)


def require_permission(ctx, action: str):
    session = ctx.obj['plane'].session
    if not session.has_permission(action):
        click.echo(f"❌ Permission denied: '{action}' access required. Run 'login' first.")
        ctx.exit(1)


def echo_json(data: Any):
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


@click.group()
@click.option('--config', '-c', default='config/config.yaml', help='Configuration file path')
@click.option('--no-latency', is_flag=True, help='Skip simulated network latency')
@click.pass_context
def cli(ctx, config, no_latency):
    """Multi-tenant SaaS Admin Console CLI"""
    ctx.ensure_object(dict)
    settings = load_config(config)
    if no_latency:
        settings.latency_scale = 0.0

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj['config'] = settings
    ctx.obj['plane'] = build_control_plane(settings)


# Session
@cli.command()
@click.option('--role', type=click.Choice([r.value for r in PlatformRole]), default='PLATFORM_ADMIN')
@click.pass_context
def login(ctx, role):
    """Sign in locally as a platform operator"""
    user = ctx.obj['plane'].session.login(PlatformRole(role))
    click.echo(f"🔑 Signed in as {user.email} ({user.platform_role.value})")


@cli.command()
@click.pass_context
def logout(ctx):
    """Sign out"""
    ctx.obj['plane'].session.logout()
    click.echo("👋 Signed out")


@cli.command()
@click.pass_context
def whoami(ctx):
    """Show the signed-in operator"""
    user = ctx.obj['plane'].session.get_user()
    if user is None:
        click.echo("Not signed in")
    else:
        click.echo(f"{user.email} ({user.platform_role.value})")


@cli.command()
@click.confirmation_option(prompt='Clear all stored tenants and the signed-in user?')
@click.pass_context
def reset(ctx):
    """Clear stored tenants and the current user"""
    ctx.obj['plane'].session.reset()
    click.echo("🧹 Local data cleared; fixtures will be reseeded on next use")


# Tenants
@cli.group()
def tenants():
    """Tenant management commands"""
    pass


@tenants.command('list')
@click.option('--type', 'tenant_type', type=click.Choice(['ORG', 'INDIVIDUAL']))
@click.option('--plan')
@click.option('--status', type=click.Choice([s.value for s in TenantStatus]))
@click.option('--isolation', type=click.Choice(['Pooled', 'SiloInVpc', 'SiloAccount']))
@click.option('--region')
@click.option('--query', '-q', help='Match name, identifier or contact email')
@click.option('--limit', type=int)
@click.pass_context
def list_tenants(ctx, tenant_type, plan, status, isolation, region, query, limit):
    """List tenants"""
    require_permission(ctx, 'read')
    request = TenantQuery(type=tenant_type, plan=plan, status=status, isolationModel=isolation,
                          region=region, q=query, limit=limit)
    result = run_call(ctx, ctx.obj['plane'].tenants.list_tenants(request))

    items = result['items']
    click.echo(f"🏢 {len(items)} tenant(s)")
    for tenant in items:
        icon = STATUS_ICONS.get(tenant['status'], "•")
        click.echo(
            f"   {icon} {tenant['tenantId']:<24} {tenant['tenantName']:<16} "
            f"{tenant['plan']:<11} {tenant['isolationModel']:<12} {tenant['region']}"
        )


@tenants.command('show')
@click.argument('tenant_id')
@click.pass_context
def show_tenant(ctx, tenant_id):
    """Show one tenant"""
    require_permission(ctx, 'read')
    echo_json(run_call(ctx, ctx.obj['plane'].tenants.get_tenant(tenant_id)))


@tenants.command('create')
@click.argument('tenant_name')
@click.option('--type', 'tenant_type', type=click.Choice(['ORG', 'INDIVIDUAL']), default='ORG')
@click.option('--plan', default='trial')
@click.option('--isolation', type=click.Choice(['Pooled', 'SiloInVpc', 'SiloAccount']), default='Pooled')
@click.option('--region', default='ap-northeast-2')
@click.option('--email', required=True, help='Admin contact email')
@click.option('--legal-entity', help='Legal entity name (organizations)')
@click.option('--seats', type=int, default=0)
@click.option('--domain', help='Explicit domain instead of the derived one')
@click.pass_context
def create_tenant(ctx, tenant_name, tenant_type, plan, isolation, region, email,
                  legal_entity, seats, domain):
    """Create a new tenant"""
    require_permission(ctx, 'write')
    org_profile: Optional[Dict[str, Any]] = None
    if legal_entity:
        org_profile = {"legalEntity": legal_entity, "seats": seats}

    request = CreateTenantRequest(
        tenantType=tenant_type, tenantName=tenant_name, plan=plan, isolationModel=isolation,
        region=region, domain=domain, contact={"email": email}, orgProfile=org_profile,
    )
    try:
        validate_create_request(request)
    except ApiError as e:
        click.echo(f"❌ {e.message}")
        for problem in e.details.get("fields", []):
            click.echo(f"   - {problem}")
        ctx.exit(1)

    click.echo(f"🚀 Creating tenant: {tenant_name}")
    result = run_call(ctx, ctx.obj['plane'].tenants.create_tenant(request))
    click.echo("✅ Tenant created!")
    click.echo(f"   Tenant ID: {result['tenantId']}")
    click.echo(f"   Status: {result['status']}")
    click.echo(f"   Plan: {result['plan']}")


@tenants.command('update-entitlements')
@click.argument('tenant_id')
@click.option('--plan', help='Replace the plan')
@click.option('--isolation', type=click.Choice(['Pooled', 'SiloInVpc', 'SiloAccount']))
@click.option('--set', 'assignments', multiple=True, help='Entitlement as key=value, repeatable')
@click.pass_context
def update_entitlements(ctx, tenant_id, plan, isolation, assignments):
    """Patch a tenant's entitlements"""
    require_permission(ctx, 'write')
    entitlements = dict(parse_entitlement(raw) for raw in assignments)
    request = UpdateEntitlementsRequest(plan=plan, entitlements=entitlements or None,
                                        targetIsolation=isolation)
    result = run_call(ctx, ctx.obj['plane'].tenants.update_entitlements(tenant_id, request))
    click.echo(f"✅ Entitlements for {result['tenantId']}: {result['status']}")


@tenants.command('suspend')
@click.argument('tenant_id')
@click.option('--reason', required=True)
@click.pass_context
def suspend_tenant(ctx, tenant_id, reason):
    """Suspend a tenant"""
    require_permission(ctx, 'write')
    run_call(ctx, ctx.obj['plane'].tenants.suspend_tenant(tenant_id, reason))
    click.echo(f"⏸️  Suspended {tenant_id}")


@tenants.command('resume')
@click.argument('tenant_id')
@click.pass_context
def resume_tenant(ctx, tenant_id):
    """Resume a suspended tenant"""
    require_permission(ctx, 'write')
    run_call(ctx, ctx.obj['plane'].tenants.resume_tenant(tenant_id))
    click.echo(f"▶️  Resumed {tenant_id}")


@tenants.command('delete')
@click.argument('tenant_id')
@click.option('--preserve-days', type=int, default=30, help='Requested data retention in days')
@click.confirmation_option(prompt='Delete this tenant?')
@click.pass_context
def delete_tenant(ctx, tenant_id, preserve_days):
    """Delete a tenant"""
    require_permission(ctx, 'write')
    run_call(ctx, ctx.obj['plane'].tenants.delete_tenant(tenant_id, preserve_days))
    click.echo(f"🗑️  Deleted {tenant_id}")


# Plans
@cli.group()
def plans():
    """Plan catalog commands"""
    pass


@plans.command('list')
@click.pass_context
def list_plans(ctx):
    """List subscription plans"""
    require_permission(ctx, 'read')
    for plan in run_call(ctx, ctx.obj['plane'].tenants.get_plans()):
        billing = plan['billing']
        price = "free" if billing['model'] == 'free' else (
            "custom" if billing['model'] == 'custom' else f"${billing['base']:.2f}/{billing['currency']}"
        )
        flags = ", ".join(plan['featureFlags']) or "-"
        click.echo(f"   📦 {plan['planId']:<11} {plan['displayName']:<13} {price:<14} {flags}")


@plans.command('show')
@click.argument('plan_id')
@click.pass_context
def show_plan(ctx, plan_id):
    """Show one plan"""
    require_permission(ctx, 'read')
    echo_json(run_call(ctx, ctx.obj['plane'].tenants.get_plan(plan_id)))


# Users
@cli.group()
def users():
    """User and seat commands"""
    pass


@users.command('list')
@click.option('--status', type=click.Choice(['ACTIVE', 'INVITED', 'DISABLED']))
@click.option('--role', type=click.Choice(['TENANT_ADMIN', 'BILLING_ADMIN', 'MEMBER']))
@click.option('--tenant', 'tenant_id')
@click.option('--query', '-q')
@click.option('--limit', type=int)
@click.pass_context
def list_users(ctx, status, role, tenant_id, query, limit):
    """List users across tenants"""
    require_permission(ctx, 'read')
    request = UserQuery(status=status, role=role, tenantId=tenant_id, q=query, limit=limit)
    result = run_call(ctx, ctx.obj['plane'].users.get_all_users(request))
    click.echo(f"👥 {len(result['items'])} user(s)")
    for user in result['items']:
        click.echo(f"   {user['email']:<28} {user['role']:<14} {user['status']:<9} {user['tenantName']}")


@users.command('stats')
@click.pass_context
def user_stats(ctx):
    """User totals by status, tenant and role"""
    require_permission(ctx, 'read')
    stats = run_call(ctx, ctx.obj['plane'].users.get_user_stats())
    click.echo(f"📊 Total: {stats['total']}  Active: {stats['active']}  "
               f"Invited: {stats['invited']}  Disabled: {stats['suspended']}")
    for role, count in stats['byRole'].items():
        click.echo(f"   {role}: {count}")


@users.command('seats')
@click.argument('tenant_id')
@click.pass_context
def seats(ctx, tenant_id):
    """Seat usage for a tenant"""
    require_permission(ctx, 'read')
    result = run_call(ctx, ctx.obj['plane'].users.get_seats(tenant_id))
    click.echo(f"💺 {result['used']}/{result['quota']} seats used, {result['pendingInvites']} pending invites")


# Audit
@cli.command()
@click.option('--actor', help='Substring of the actor identity')
@click.option('--action', help='Exact action name')
@click.pass_context
def audit(ctx, actor, action):
    """Show audit log entries"""
    require_permission(ctx, 'read')
    result = run_call(ctx, ctx.obj['plane'].audit.get_audit_log(AuditQuery(actor=actor, action=action)))
    for entry in result['items']:
        click.echo(f"   📝 {entry['timestamp']}  {entry['actor']:<26} {entry['action']:<20} {entry['requestId']}")


# Usage
@cli.group()
def usage():
    """Usage analytics commands"""
    pass


@usage.command('analytics')
@click.argument('tenant_id')
@click.option('--day', help='Drill into one ISO date of the week')
@click.pass_context
def tenant_analytics(ctx, tenant_id, day):
    """Weekly usage analytics for a tenant"""
    require_permission(ctx, 'read')
    analytics = run_call(ctx, ctx.obj['plane'].usage.get_tenant_usage_analytics(tenant_id))
    summary = analytics['summary']
    date_range = analytics['dateRange']

    click.echo(f"📈 Usage for {tenant_id}: {date_range['from']} → {date_range['to']}")
    for point in analytics['metrics']['compute']:
        click.echo(f"   {point['label']:<7} {'█' * (point['value'] // 10)} {point['value']}h")
    click.echo(f"   Total compute: {summary['totalCompute']}h (avg {summary['avgCompute']}h/day)")
    click.echo(f"   Peak: {summary['peakCompute']}h on {summary['peakComputeDate']}")
    click.echo(f"   Storage avg: {summary['avgStorage']} GB  Egress avg: {summary['avgEgress']} GB")

    if day:
        metrics = analytics['metrics']
        for i, point in enumerate(metrics['compute']):
            if point['date'] == day:
                echo_json(breakdown_day(day, point['value'], metrics['storage'][i]['value'],
                                        metrics['egress'][i]['value']))
                break
        else:
            click.echo(f"❌ {day} is outside the reported week")


@usage.command('chart')
@click.argument('tenant_id')
@click.option('--period', type=click.Choice(['week', 'month']), default='week')
@click.pass_context
def usage_chart(ctx, tenant_id, period):
    """Chart data, falling back to generated data when analytics are unavailable"""
    require_permission(ctx, 'read')
    chart = run_call(ctx, ctx.obj['plane'].usage.get_usage_chart(tenant_id, period))
    if chart['source'] == 'generated':
        click.echo(f"⚠️  {chart['error']}; showing generated data")
    for point in chart['points']:
        click.echo(f"   {point['label']:<7} compute={point['compute']:<4} "
                   f"storage={point['storage']:<4} egress={point['egress']}")


@usage.command('summary')
@click.option('--tenant', 'tenant_id')
@click.option('--range', 'range_key', type=click.Choice(['1d', '7d', '30d']), default='7d')
@click.pass_context
def usage_summary(ctx, tenant_id, range_key):
    """Usage summary for a time range"""
    require_permission(ctx, 'read')
    echo_json(run_call(ctx, ctx.obj['plane'].usage.get_usage(tenant_id, range_key)))


if __name__ == '__main__':
    cli()
