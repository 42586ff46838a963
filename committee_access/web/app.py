"""Flask application exposing committee pages and management forms."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from flask import (
    Flask,
    Response,
    flash,
    redirect,
    render_template_string,
    request,
    session,
    url_for,
)

from ..config import Settings, load_settings
from ..engine.roles import Action, Affordance
from ..engine.selection import parse_identifiers
from ..errors import AuthorizationDenied, NotFound, ValidationFailed, VisibilityDenied
from ..io.fixture_loader import load_store
from ..io.policy_loader import load_policy
from ..notifications import MemoryNotifier, Notifier
from ..reporting.members import member_rows
from ..service import CommitteeService
from ..store import InMemoryStore

logger = logging.getLogger(__name__)

HEAD = """
<!doctype html>
<title>{{ title }}</title>
{% with messages = get_flashed_messages() %}
  {% if messages %}
  <ul id="notice-flashes">{% for m in messages %}<li>{{ m }}</li>{% endfor %}</ul>
  {% endif %}
{% endwith %}
"""

INDEX_TEMPLATE = HEAD + """
<h1>Committees</h1>
<ul>
  {% for committee in committees %}
  <li><a href="{{ url_for('show_committee', uuid=committee.uuid, slug=committee.slug) }}">{{ committee.name }}</a></li>
  {% endfor %}
</ul>
{% if viewer %}
<p>Logged in as {{ viewer.full_name }} - <a href="{{ url_for('logout') }}">Log out</a></p>
{% else %}
<form method=post action="{{ url_for('login') }}">
  <input type=email name=email placeholder="Email">
  <input type=submit value="Log in">
</form>
{% endif %}
"""

PAGE_TEMPLATE = HEAD + """
<h1 class="committee-name">{{ page.committee.name }}</h1>
<div class="committee__card">
  <p class="committee-members">{{ page.members_count }} adherent{{ 's' if page.members_count > 1 else '' }}</p>
  {% for host in page.hosts %}
  <div class="committee-host">
    {% if host.adherent_uuid == viewer_uuid %}
    {{ names[host.adherent_uuid] }} (you)
    {% else %}
    {{ names[host.adherent_uuid] }} <a href="#contact-{{ host.adherent_uuid }}">Contact</a>
    {% endif %}
  </div>
  {% endfor %}
  {% if page.committee.facebook_page_url %}<a class="committee-facebook" href="{{ page.committee.facebook_page_url }}">Facebook</a>{% endif %}
  {% if page.committee.twitter_nickname %}<a class="committee-twitter" href="https://twitter.com/{{ page.committee.twitter_nickname }}">Twitter</a>{% endif %}
  {% if page.committee.google_plus_page_url %}<a class="committee-google-plus" href="{{ page.committee.google_plus_page_url }}">Google+</a>{% endif %}

  {% if page.affordances.is_active(A.REGISTER_LINK) %}
  <a id="committee-register-link" href="{{ url_for('index') }}">Register to follow this committee</a>
  {% endif %}
  {% if page.affordances.is_active(A.FOLLOW_LINK) %}
  <form method=post action="{{ url_for('follow_committee', uuid=page.committee.uuid, slug=page.committee.slug) }}">
    <button class="committee-follow" type=submit>Follow</button>
  </form>
  {% endif %}
  {% if A.UNFOLLOW_LINK in page.affordances %}
  <form method=post action="{{ url_for('unfollow_committee', uuid=page.committee.uuid, slug=page.committee.slug) }}">
    <button class="committee-unfollow" type=submit{% if page.affordances.is_disabled(A.UNFOLLOW_LINK) %} disabled="disabled"{% endif %}>Unfollow</button>
  </form>
  {% endif %}
</div>

{% if A.HOST_NAV in page.affordances %}
<nav id="committee-host-nav">
  <a href="{{ url_for('edit_committee', uuid=page.committee.uuid, slug=page.committee.slug) }}">Edit the committee</a>
  <a href="{{ url_for('add_event', uuid=page.committee.uuid, slug=page.committee.slug) }}">Create an event</a>
  <a href="{{ url_for('list_members', uuid=page.committee.uuid, slug=page.committee.slug) }}">Manage members</a>
</nav>
{% endif %}

{% if A.MESSAGE_FORM in page.affordances %}
<form name="committee_feed_message" method=post action="{{ url_for('post_message', uuid=page.committee.uuid, slug=page.committee.slug) }}">
  {% if message_errors %}
  <ul class="form__errors">{% for e in message_errors %}<li class="form__error">{{ e }}</li>{% endfor %}</ul>
  {% endif %}
  <textarea name="content">{{ content or '' }}</textarea>
  <label><input type=checkbox name="published" value="1"> Publish</label>
  <button type=submit name="send">Send</button>
</form>
{% endif %}

<section class="committee__timeline">
  {% for entry in page.timeline %}
  <article class="committee__timeline__message{% if not entry.item.is_published() %} committee__timeline__message--draft{% endif %}">
    <h3>{{ names.get(entry.item.author_uuid, '') }}</h3>
    <div>{{ entry.content }}</div>
  </article>
  {% endfor %}
</section>
"""

FORM_TEMPLATE = HEAD + """
<h1>{{ title }}</h1>
<form id="{{ form_id }}" method=post>
  {% if errors %}
  <ul class="form__errors">
    {% for field, messages in errors.items() %}{% for m in messages %}
    <li class="form__error" data-field="{{ field }}">{{ m }}</li>
    {% endfor %}{% endfor %}
  </ul>
  {% endif %}
  {% for name, value in values.items() %}
  <label>{{ name }} <input type=text name="{{ name }}" id="{{ form_id }}_{{ name | replace('.', '_') }}" value="{{ value }}"></label>
  {% endfor %}
  <p><input type=submit value="Save"></p>
</form>
"""

MEMBERS_TEMPLATE = HEAD + """
<h1>Members of {{ members.committee.name }}</h1>
<table>
  <tr><th></th><th>First name</th><th>Last name</th><th>Postal code</th><th>City</th><th>Member since</th><th></th></tr>
  {% for row in rows %}
  <tr>
    <td><input type=checkbox name="members[]" value="{{ row.uuid }}"></td>
    <td class="member-first-name">{{ row.first_name }}</td>
    <td class="member-last-name">{{ row.last_name }}</td>
    <td class="member-postal-code">{{ row.postal_code }}</td>
    <td class="member-city-name">{{ row.city_name }}</td>
    <td class="member-subscription-date">{{ row.subscription_date }}</td>
    <td>{% if row.uuid in promotable %}<a class="promote-host-link" href="{{ url_for('promote_host', uuid=members.committee.uuid, slug=members.committee.slug, member_uuid=row.uuid) }}">Promote to host</a>{% endif %}</td>
  </tr>
  {% endfor %}
</table>
<form method=post action="{{ url_for('export_members', uuid=members.committee.uuid, slug=members.committee.slug) }}">
  <input type=hidden name="exports" value="">
  <button type=submit>Export</button>
</form>
<form method=post action="{{ url_for('contact_members', uuid=members.committee.uuid, slug=members.committee.slug) }}">
  <input type=hidden name="contacts" value="">
  <button type=submit>Contact</button>
</form>
"""

CONTACT_TEMPLATE = HEAD + """
<h1>Contact {{ recipients | length }} member(s)</h1>
<form method=post>
  {% if errors %}
  <ul class="form__errors">{% for m in errors %}<li class="form__error">{{ m }}</li>{% endfor %}</ul>
  {% endif %}
  <input type=hidden name="contacts" value="{{ contacts }}">
  <textarea name="message"></textarea>
  <button type=submit>Send</button>
</form>
"""

PROMOTE_TEMPLATE = HEAD + """
<h1>Promote {{ name }} to host?</h1>
<form method=post>
  <button type=submit>Yes, promote the member</button>
</form>
"""

EVENT_FIELDS = [
    "name",
    "description",
    "category",
    "address.address",
    "address.postal_code",
    "address.city_name",
    "address.country",
    "begin_at",
    "finish_at",
    "capacity",
]

COMMITTEE_FIELDS = [
    "name",
    "description",
    "address.address",
    "address.postal_code",
    "address.city_name",
    "address.country",
    "facebook_page_url",
    "twitter_nickname",
    "google_plus_page_url",
]


def _nested(form: Any, names: list) -> Dict[str, Any]:
    """Turn flat ``address.city_name`` style form fields into nested mappings."""
    data: Dict[str, Any] = {}
    for name in names:
        value = form.get(name, "")
        head, _, tail = name.partition(".")
        if tail:
            data.setdefault(head, {})[tail] = value
        else:
            data[head] = value
    return data


def create_app(
    settings: Settings | None = None,
    store: InMemoryStore | None = None,
    notifier: Notifier | None = None,
) -> Flask:
    """Build the Flask application.

    ``store`` defaults to the fixtures named in ``settings``; the policy file
    from ``settings`` overrides the default access tables when present.
    """
    settings = settings or load_settings()
    logging.getLogger("committee_access").setLevel(settings.log_level)

    if store is None:
        store = load_store(settings.fixtures_path) if settings.fixtures_path else InMemoryStore()
    kwargs = {}
    if settings.policy_path:
        kwargs["policy"] = load_policy(settings.policy_path)
    service = CommitteeService(store, notifier or MemoryNotifier(), **kwargs)

    app = Flask(__name__)
    app.secret_key = settings.secret_key
    app.extensions["committee_service"] = service

    def current_uuid() -> Optional[str]:
        uuid = session.get("adherent_uuid")
        if uuid is not None and uuid not in store.adherents:
            session.pop("adherent_uuid")
            return None
        return uuid

    def names() -> Dict[str, str]:
        return {uuid: a.full_name for uuid, a in store.adherents.items()}

    def page_url(uuid: str) -> str:
        committee = store.get_committee(uuid)
        return url_for("show_committee", uuid=uuid, slug=committee.slug)

    def render_page(uuid: str, message_errors=None, content: str = "", status: int = 200):
        viewer = current_uuid()
        page = service.view(uuid, viewer)
        html = render_template_string(
            PAGE_TEMPLATE,
            title=page.committee.name,
            page=page,
            viewer_uuid=viewer,
            names=names(),
            A=Affordance,
            message_errors=message_errors,
            content=content,
        )
        return html, status

    @app.errorhandler(VisibilityDenied)
    @app.errorhandler(AuthorizationDenied)
    def forbidden(exc):
        return render_template_string(HEAD + "<h1>Forbidden</h1>", title="Forbidden"), 403

    @app.errorhandler(NotFound)
    def not_found(exc):
        return render_template_string(HEAD + "<h1>Not found</h1>", title="Not found"), 404

    @app.route("/")
    def index():
        viewer = current_uuid()
        visible = [c for c in store.committees.values() if c.is_approved()]
        return render_template_string(
            INDEX_TEMPLATE,
            title="Committees",
            committees=sorted(visible, key=lambda c: c.name),
            viewer=store.adherents.get(viewer) if viewer else None,
        )

    @app.route("/connexion", methods=["POST"])
    def login():
        adherent = store.find_adherent_by_email(request.form.get("email", ""))
        if adherent is None:
            return render_template_string(HEAD + "<p>Unknown adherent.</p>", title="Log in"), 401
        session["adherent_uuid"] = adherent.uuid
        logger.info("Adherent %s logged in", adherent.uuid)
        return redirect(url_for("index"))

    @app.route("/deconnexion")
    def logout():
        session.pop("adherent_uuid", None)
        return redirect(url_for("index"))

    @app.route("/comites/<uuid>/<slug>")
    def show_committee(uuid: str, slug: str):
        return render_page(uuid)

    @app.route("/comites/<uuid>/<slug>/rejoindre", methods=["POST"])
    def follow_committee(uuid: str, slug: str):
        service.follow(uuid, current_uuid())
        flash("You now follow this committee.")
        return redirect(page_url(uuid))

    @app.route("/comites/<uuid>/<slug>/quitter", methods=["POST"])
    def unfollow_committee(uuid: str, slug: str):
        service.unfollow(uuid, current_uuid())
        flash("You no longer follow this committee.")
        return redirect(page_url(uuid))

    @app.route("/comites/<uuid>/<slug>/messages", methods=["POST"])
    def post_message(uuid: str, slug: str):
        content = request.form.get("content", "")
        published = request.form.get("published") == "1"
        try:
            service.post_message(uuid, current_uuid(), content, published)
        except ValidationFailed as exc:
            return render_page(uuid, exc.errors.get("content"), content)
        flash("Your message has been published." if published else "Your message has been sent.")
        return redirect(page_url(uuid))

    @app.route("/comites/<uuid>/<slug>/editer", methods=["GET", "POST"])
    def edit_committee(uuid: str, slug: str):
        viewer = current_uuid()
        committee = service.authorize(uuid, viewer, Action.EDIT_INFO)
        errors: Dict[str, Any] = {}
        if request.method == "POST":
            try:
                service.edit_info(uuid, viewer, _nested(request.form, COMMITTEE_FIELDS))
            except ValidationFailed as exc:
                errors = exc.errors
            else:
                flash("The committee information has been updated.")
                return redirect(url_for("edit_committee", uuid=uuid, slug=committee.slug))
            values = {name: request.form.get(name, "") for name in COMMITTEE_FIELDS}
        else:
            values = {
                "name": committee.name,
                "description": committee.description,
                "address.address": committee.address.get("address", ""),
                "address.postal_code": committee.address.get("postal_code", ""),
                "address.city_name": committee.address.get("city_name", ""),
                "address.country": committee.address.get("country", ""),
                "facebook_page_url": committee.facebook_page_url,
                "twitter_nickname": committee.twitter_nickname,
                "google_plus_page_url": committee.google_plus_page_url,
            }
        return render_template_string(
            FORM_TEMPLATE,
            title="Edit the committee",
            form_id="committee",
            errors=errors,
            values=values,
        )

    @app.route("/comites/<uuid>/<slug>/evenements/ajouter", methods=["GET", "POST"])
    def add_event(uuid: str, slug: str):
        viewer = current_uuid()
        service.authorize(uuid, viewer, Action.PUBLISH_EVENT)
        errors: Dict[str, Any] = {}
        if request.method == "POST":
            try:
                service.publish_event(uuid, viewer, _nested(request.form, EVENT_FIELDS))
            except ValidationFailed as exc:
                errors = exc.errors
            else:
                flash("The new event has been created and published on the committee page.")
                return redirect(page_url(uuid))
        values = {name: request.form.get(name, "") for name in EVENT_FIELDS}
        return render_template_string(
            FORM_TEMPLATE,
            title="Create an event",
            form_id="committee_event",
            errors=errors,
            values=values,
        )

    @app.route("/comites/<uuid>/<slug>/membres")
    def list_members(uuid: str, slug: str):
        members = service.list_members(uuid, current_uuid())
        rows = member_rows(members.members, store.adherents)
        for row, membership in zip(rows, members.members):
            row["uuid"] = membership.adherent_uuid
        return render_template_string(
            MEMBERS_TEMPLATE,
            title="Members",
            members=members,
            rows=rows,
            promotable={m.adherent_uuid for m in members.promotable},
        )

    @app.route("/comites/<uuid>/<slug>/membres/export", methods=["POST"])
    def export_members(uuid: str, slug: str):
        requested = parse_identifiers(request.form.get("exports"))
        content = service.export_members(uuid, current_uuid(), requested)
        return Response(
            content,
            mimetype="text/csv",
            headers={"Content-Disposition": "attachment; filename=members.csv"},
        )

    @app.route("/comites/<uuid>/<slug>/membres/contact", methods=["POST"])
    def contact_members(uuid: str, slug: str):
        viewer = current_uuid()
        requested = parse_identifiers(request.form.get("contacts"))
        recipients = service.select_contacts(uuid, viewer, requested)
        errors = []
        if "message" in request.form:
            try:
                service.contact_members(uuid, viewer, requested, request.form["message"])
            except ValidationFailed as exc:
                errors = exc.errors.get("message", [])
            else:
                flash("Your message has been sent to the selected members.")
                return redirect(url_for("list_members", uuid=uuid, slug=slug))
        return render_template_string(
            CONTACT_TEMPLATE,
            title="Contact members",
            recipients=recipients,
            contacts=json.dumps([m.adherent_uuid for m in recipients]),
            errors=errors,
        )

    @app.route(
        "/comites/<uuid>/<slug>/promouvoir-animateur/<member_uuid>",
        methods=["GET", "POST"],
    )
    def promote_host(uuid: str, slug: str, member_uuid: str):
        viewer = current_uuid()
        if request.method == "POST":
            service.promote_host(uuid, viewer, member_uuid)
            flash("The member has been promoted to committee host.")
            return redirect(url_for("list_members", uuid=uuid, slug=slug))
        service.authorize(uuid, viewer, Action.PROMOTE_HOST)
        adherent = store.get_adherent(member_uuid)
        return render_template_string(
            PROMOTE_TEMPLATE, title="Promote a host", name=adherent.full_name
        )

    return app
