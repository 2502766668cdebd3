"""
Tests for the per-resource handlers, called directly
"""
from cms_gateway import config
from cms_gateway.auth.permissions import CallerContext
from cms_gateway.models.content import FormSubmission
from cms_gateway.outcome import ErrorKind
from cms_gateway.schemas.request import GatewayRequest
from cms_gateway.services import content
from cms_gateway.services.forms import submit_form

T1 = CallerContext(tenant_id="t1", key_id="key_1")
T2 = CallerContext(tenant_id="t2", key_id="key_2")


def _seed(db, service, **fields):
    return service.store.create(db, fields)


class TestList:

    def test_only_published_in_own_tenant(self, db):
        _seed(db, content.pages, tenant_id="t1", slug="a", status="published")
        _seed(db, content.pages, tenant_id="t1", slug="b", status="draft")
        _seed(db, content.pages, tenant_id="t2", slug="a", status="published")

        outcome = content.pages.list(db, T1, GatewayRequest())

        assert outcome.is_ok
        assert [(r["tenant_id"], r["slug"]) for r in outcome.body["data"]] == [("t1", "a")]

    def test_caller_filters_narrow_but_never_change_tenant(self, db):
        _seed(db, content.products, tenant_id="t1", slug="a", status="published", category="shoes")
        _seed(db, content.products, tenant_id="t1", slug="b", status="published", category="hats")
        _seed(db, content.products, tenant_id="t2", slug="c", status="published", category="shoes")

        req = GatewayRequest(filters={"category": "shoes", "tenant_id": "t2"})
        data = content.products.list(db, T1, req).body["data"]

        assert [r["slug"] for r in data] == ["a"]

    def test_blog_sorted_by_publish_date_descending(self, db):
        for slug, date in [("b", "2025-02-01T00:00:00Z"), ("c", "2025-03-01T00:00:00Z"),
                           ("a", "2025-01-01T00:00:00Z")]:
            _seed(db, content.blog, tenant_id="t1", slug=slug, status="published", publish_date=date)

        data = content.blog.list(db, T1, GatewayRequest()).body["data"]
        dates = [r["publish_date"] for r in data]

        assert dates == sorted(dates, reverse=True)
        assert [r["slug"] for r in data] == ["c", "b", "a"]

    def test_forms_list_uses_active_status(self, db):
        _seed(db, content.forms, tenant_id="t1", slug="contact", status="active")
        _seed(db, content.forms, tenant_id="t1", slug="old", status="inactive")

        data = content.forms.list(db, T1, GatewayRequest()).body["data"]

        assert [r["slug"] for r in data] == ["contact"]

    def test_submissions_newest_first_any_status(self, db):
        first = _seed(db, content.submissions, tenant_id="t1", form_id="f", status="new")
        second = _seed(db, content.submissions, tenant_id="t1", form_id="f", status="read")
        _seed(db, content.submissions, tenant_id="t2", form_id="f", status="new")

        data = content.submissions.list(db, T1, GatewayRequest()).body["data"]

        assert [r["id"] for r in data] == [second.id, first.id]


class TestGet:

    def test_first_match_in_tenant(self, db):
        _seed(db, content.pages, tenant_id="t2", slug="home", title="Theirs")
        _seed(db, content.pages, tenant_id="t1", slug="home", title="Ours")

        data = content.pages.get(db, T1, GatewayRequest(slug="home")).body["data"]

        assert data["title"] == "Ours"
        assert data["tenant_id"] == "t1"

    def test_absent_record_is_null_not_error(self, db):
        outcome = content.pages.get(db, T1, GatewayRequest(slug="missing"))
        assert outcome.is_ok
        assert outcome.body == {"data": None}

    def test_missing_slug_is_null(self, db):
        _seed(db, content.pages, tenant_id="t1", title="no slug")
        assert content.pages.get(db, T1, GatewayRequest()).body == {"data": None}

    def test_get_ignores_status(self, db):
        _seed(db, content.blog, tenant_id="t1", slug="draft-post", status="draft")
        assert content.blog.get(db, T1, GatewayRequest(slug="draft-post")).body["data"] is not None


class TestCreateUpdate:

    def test_create_overwrites_client_tenant(self, db):
        req = GatewayRequest(data={"title": "Home", "tenant_id": "t2"})

        data = content.pages.create(db, T1, req).body["data"]

        assert data["tenant_id"] == "t1"
        assert data["title"] == "Home"

    def test_create_with_non_object_data(self, db):
        data = content.products.create(db, T1, GatewayRequest(data="oops")).body["data"]
        assert data["tenant_id"] == "t1"
        assert data["status"] == "draft"

    def test_update_own_record(self, db):
        page = _seed(db, content.pages, tenant_id="t1", slug="home", title="Home")

        outcome = content.pages.update(db, T1, GatewayRequest(id=page.id, data={"title": "Welcome"}))

        assert outcome.body["data"]["title"] == "Welcome"

    def test_update_other_tenants_record_is_not_found(self, db):
        page = _seed(db, content.pages, tenant_id="t1", slug="home", title="Home")

        outcome = content.pages.update(db, T2, GatewayRequest(id=page.id, data={"title": "Pwned"}))

        assert outcome.error == ErrorKind.RECORD_NOT_FOUND
        db.expire_all()
        assert content.pages.store.get(db, page.id, "t1").title == "Home"

    def test_update_without_id(self, db):
        assert content.blog.update(db, T1, GatewayRequest(data={})).error == ErrorKind.RECORD_NOT_FOUND


class TestSubmit:

    def test_unknown_form(self, db):
        outcome = submit_form(db, T1, GatewayRequest(slug="contact", data={"email": "a@b.c"}))
        assert outcome.error == ErrorKind.FORM_NOT_FOUND
        assert db.query(FormSubmission).count() == 0

    def test_form_of_other_tenant_or_inactive(self, db):
        _seed(db, content.forms, tenant_id="t2", slug="contact", status="active")
        _seed(db, content.forms, tenant_id="t1", slug="contact", status="inactive")

        outcome = submit_form(db, T1, GatewayRequest(slug="contact"))

        assert outcome.error == ErrorKind.FORM_NOT_FOUND

    def test_creates_one_new_submission(self, db):
        form = _seed(db, content.forms, tenant_id="t1", slug="contact", status="active",
                     name="Contact", success_message="We will be in touch")

        outcome = submit_form(db, T1, GatewayRequest(slug="contact", data={"email": "a@b.c"}))

        assert outcome.body == {"success": True, "message": "We will be in touch"}
        rows = db.query(FormSubmission).all()
        assert len(rows) == 1
        sub = rows[0]
        assert (sub.tenant_id, sub.form_id, sub.form_name, sub.status) == ("t1", form.id, "Contact", "new")
        assert sub.data == {"email": "a@b.c"}

    def test_default_message(self, db):
        _seed(db, content.forms, tenant_id="t1", slug="contact", status="active", name="Contact")
        outcome = submit_form(db, T1, GatewayRequest(slug="contact", data={}))
        assert outcome.body["message"] == config.DEFAULT_SUBMIT_MESSAGE == "Thank you!"
