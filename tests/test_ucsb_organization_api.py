from campus_api.core.entities import UCSBOrganization

BASE = "/api/UCSBOrganization"

GR_PARAMS = {
    "orgCode": "GR",
    "orgTranslation": "GauchoRadio",
    "orgTranslationShort": "GauRadio",
    "inactive": "true",
}

GR_JSON = {
    "orgCode": "GR",
    "orgTranslationShort": "GauRadio",
    "orgTranslation": "GauchoRadio",
    "inactive": True,
}


def _seed(repos, **kw):
    return repos["UCSBOrganization"].save(UCSBOrganization(**kw))


# ------------------------------------------------------------
# GET /api/UCSBOrganization/all
# ------------------------------------------------------------
def test_logged_out_users_cannot_get_all(client, repos):
    r = client.get(f"{BASE}/all")
    assert r.status_code == 403
    assert repos["UCSBOrganization"].calls == []


def test_logged_in_users_can_get_all(user_client):
    r = user_client.get(f"{BASE}/all")
    assert r.status_code == 200
    assert r.json() == []


def test_logged_in_user_can_get_all_organizations_in_store_order(user_client, repos):
    _seed(repos, org_code="KRC", org_translation="KOREAN RADIO CLUB", org_translation_short="KOREAN RADIO CL", inactive=False)
    _seed(repos, org_code="OSLI", org_translation="OFFICE OF STUDENT LIFE", org_translation_short="STUDENT LIFE", inactive=False)
    repos["UCSBOrganization"].calls.clear()

    r = user_client.get(f"{BASE}/all")

    assert r.status_code == 200
    assert [o["orgCode"] for o in r.json()] == ["KRC", "OSLI"]
    assert r.json()[1] == {
        "orgCode": "OSLI",
        "orgTranslationShort": "STUDENT LIFE",
        "orgTranslation": "OFFICE OF STUDENT LIFE",
        "inactive": False,
    }
    assert repos["UCSBOrganization"].calls == [("find_all", None)]


# ------------------------------------------------------------
# POST /api/UCSBOrganization/post
# ------------------------------------------------------------
def test_logged_out_users_cannot_post(client, repos):
    r = client.post(f"{BASE}/post", params=GR_PARAMS)
    assert r.status_code == 403
    assert r.json()["type"] == "AccessDeniedException"
    assert repos["UCSBOrganization"].calls == []


def test_logged_in_regular_users_cannot_post(user_client, repos):
    r = user_client.post(f"{BASE}/post", params=GR_PARAMS)
    assert r.status_code == 403
    assert repos["UCSBOrganization"].calls == []


def test_regular_user_post_without_params_is_still_forbidden(user_client):
    r = user_client.post(f"{BASE}/post")
    assert r.status_code == 403


def test_an_admin_user_can_post_a_new_organization(admin_client, repos):
    r = admin_client.post(f"{BASE}/post", params=GR_PARAMS)

    assert r.status_code == 200, r.text
    assert r.json() == GR_JSON

    saves = [c for c in repos["UCSBOrganization"].calls if c[0] == "save"]
    assert len(saves) == 1
    assert repos["UCSBOrganization"].find_by_id("GR").to_json() == GR_JSON


def test_admin_post_missing_fields_is_bad_request(admin_client, repos):
    r = admin_client.post(f"{BASE}/post", params={"orgCode": "GR"})
    assert r.status_code == 400
    body = r.json()
    assert body["type"] == "ValidationException"
    assert "orgTranslation" in body["message"]
    assert not any(c[0] == "save" for c in repos["UCSBOrganization"].calls)


# ------------------------------------------------------------
# GET /api/UCSBOrganization?orgCode=...
# ------------------------------------------------------------
def test_logged_out_users_cannot_get_by_id(client):
    r = client.get(BASE, params={"orgCode": "GR"})
    assert r.status_code == 403


def test_logged_in_user_can_get_by_id_when_the_id_exists(user_client, repos):
    _seed(repos, org_code="GR", org_translation="GauchoRadio", org_translation_short="GauRadio", inactive=True)

    r = user_client.get(BASE, params={"orgCode": "GR"})

    assert r.status_code == 200
    assert r.json() == GR_JSON


def test_logged_in_user_can_get_by_id_when_the_id_does_not_exist(user_client, repos):
    r = user_client.get(BASE, params={"orgCode": "turk"})

    assert r.status_code == 404
    assert repos["UCSBOrganization"].calls == [("find_by_id", "turk")]
    assert r.json() == {
        "type": "EntityNotFoundException",
        "message": "UCSBOrganization with id turk not found",
    }


def test_get_without_key_is_bad_request(user_client):
    r = user_client.get(BASE)
    assert r.status_code == 400
    assert "orgCode" in r.json()["message"]


def test_key_match_is_exact(user_client, repos):
    _seed(repos, org_code="GR", org_translation="GauchoRadio", org_translation_short="GauRadio", inactive=True)
    r = user_client.get(BASE, params={"orgCode": "gr"})
    assert r.status_code == 404


# ------------------------------------------------------------
# PUT /api/UCSBOrganization?orgCode=...
# ------------------------------------------------------------
def test_admin_can_edit_an_existing_organization(admin_client, repos):
    _seed(repos, org_code="ZPR", org_translation="ZETA PHI RHO", org_translation_short="ZETA PHI RHO", inactive=False)
    edited = {
        "orgCode": "ZPR",
        "orgTranslationShort": "zp",
        "orgTranslation": "zpppppp",
        "inactive": True,
    }

    r = admin_client.put(BASE, params={"orgCode": "ZPR"}, json=edited)

    assert r.status_code == 200, r.text
    assert r.json() == edited
    assert repos["UCSBOrganization"].find_by_id("ZPR").to_json() == edited


def test_update_preserves_key_even_if_body_key_differs(admin_client, repos):
    _seed(repos, org_code="ZPR", org_translation="ZETA PHI RHO", org_translation_short="ZETA PHI RHO", inactive=False)

    r = admin_client.put(
        BASE,
        params={"orgCode": "ZPR"},
        json={"orgCode": "OTHER", "orgTranslationShort": "zp", "orgTranslation": "zpppppp", "inactive": True},
    )

    assert r.status_code == 200
    assert r.json()["orgCode"] == "ZPR"
    assert repos["UCSBOrganization"].find_by_id("OTHER") is None
    assert [o.org_code for o in repos["UCSBOrganization"].find_all()] == ["ZPR"]


def test_admin_cannot_edit_organization_that_does_not_exist(admin_client, repos):
    r = admin_client.put(
        BASE,
        params={"orgCode": "ZPR"},
        json={"orgCode": "ZPR", "orgTranslationShort": "zp", "orgTranslation": "zpppppp", "inactive": True},
    )

    assert r.status_code == 404
    assert r.json()["message"] == "UCSBOrganization with id ZPR not found"
    assert not any(c[0] == "save" for c in repos["UCSBOrganization"].calls)


def test_regular_user_cannot_edit_even_with_malformed_body(user_client, repos):
    r = user_client.put(BASE, params={"orgCode": "ZPR"}, content=b"{not json")
    assert r.status_code == 403
    assert repos["UCSBOrganization"].calls == []


def test_admin_edit_with_malformed_body_is_bad_request(admin_client, repos):
    _seed(repos, org_code="ZPR", org_translation="ZETA PHI RHO", org_translation_short="ZETA PHI RHO", inactive=False)
    r = admin_client.put(BASE, params={"orgCode": "ZPR"}, content=b"{not json")
    assert r.status_code == 400
    assert r.json()["type"] == "ValidationException"


def test_partial_update_is_rejected(admin_client, repos):
    _seed(repos, org_code="ZPR", org_translation="ZETA PHI RHO", org_translation_short="ZETA PHI RHO", inactive=False)
    r = admin_client.put(BASE, params={"orgCode": "ZPR"}, json={"inactive": True})
    assert r.status_code == 400
    assert repos["UCSBOrganization"].find_by_id("ZPR").inactive is False


# ------------------------------------------------------------
# DELETE /api/UCSBOrganization?orgCode=...
# ------------------------------------------------------------
def test_admin_can_delete_an_organization(admin_client, repos):
    _seed(repos, org_code="ZPR", org_translation="ZETA PHI RHO", org_translation_short="ZETA PHI RHO", inactive=False)

    r = admin_client.delete(BASE, params={"orgCode": "ZPR"})

    assert r.status_code == 200
    assert r.json() == {"message": "UCSBOrganization with id ZPR deleted"}
    assert repos["UCSBOrganization"].find_by_id("ZPR") is None


def test_admin_tries_to_delete_non_existent_organization_and_gets_right_error_message(admin_client, repos):
    r = admin_client.delete(BASE, params={"orgCode": "ZPR"})

    assert r.status_code == 404
    assert r.json() == {
        "type": "EntityNotFoundException",
        "message": "UCSBOrganization with id ZPR not found",
    }
    assert not any(c[0] == "delete" for c in repos["UCSBOrganization"].calls)


def test_regular_user_cannot_delete(user_client, repos):
    _seed(repos, org_code="ZPR", org_translation="ZETA PHI RHO", org_translation_short="ZETA PHI RHO", inactive=False)
    repos["UCSBOrganization"].calls.clear()

    r = user_client.delete(BASE, params={"orgCode": "ZPR"})

    assert r.status_code == 403
    assert repos["UCSBOrganization"].calls == []
