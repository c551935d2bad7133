import pytest


def _create(client, payload):
    res = client.post("/api/campaigns", json=payload)
    assert res.status_code == 201, res.text
    return res.json()["data"]


def test_create_campaign_derives_metrics(client, campaign_payload):
    campaign = _create(client, campaign_payload())

    assert campaign["costPerLead"] == 20
    assert campaign["roi"] == pytest.approx(80)
    assert campaign["conversionRate"] == pytest.approx(18)
    assert campaign["startDate"] == "2025-06-01T00:00:00"


def test_defaults_for_new_campaign(client, campaign_payload):
    payload = campaign_payload()
    for key in ("leadsGenerated", "conversions", "status"):
        del payload[key]

    campaign = _create(client, payload)

    assert campaign["leadsGenerated"] == 0
    assert campaign["conversions"] == 0
    assert campaign["status"] == "active"
    assert campaign["costPerLead"] == 0
    assert campaign["roi"] == -100


def test_conversions_above_leads_are_rejected(client, campaign_payload):
    res = client.post("/api/campaigns", json=campaign_payload(leadsGenerated=5, conversions=10))

    assert res.status_code == 400
    assert res.json()["message"] == "Conversions cannot be greater than leads generated"


def test_end_before_start_is_rejected(client, campaign_payload):
    res = client.post("/api/campaigns", json=campaign_payload(endDate="2025-05-01"))

    assert res.status_code == 400
    assert "End date must be after start date" in res.json()["message"]


def test_unknown_platform_is_rejected(client, campaign_payload):
    res = client.post("/api/campaigns", json=campaign_payload(platform="TikTok"))

    assert res.status_code == 400
    assert res.json()["success"] is False


def test_update_recomputes_metrics(client, campaign_payload):
    created = _create(client, campaign_payload())

    res = client.put(f"/api/campaigns/{created['id']}", json={"leadsGenerated": 500})
    assert res.status_code == 200
    campaign = res.json()["data"]

    assert campaign["costPerLead"] == 10
    assert campaign["roi"] == pytest.approx(-10)
    assert campaign["name"] == created["name"]


def test_update_checks_merged_record(client, campaign_payload):
    created = _create(client, campaign_payload())

    res = client.put(f"/api/campaigns/{created['id']}", json={"leadsGenerated": 10})

    assert res.status_code == 400
    assert "Conversions cannot be greater than leads generated" in res.json()["message"]


def test_list_filters(client, campaign_payload):
    _create(client, campaign_payload())
    _create(client, campaign_payload(name="Launch", platform="Google", startDate="2025-07-01",
                                     endDate="2025-07-31", status="active"))

    assert client.get("/api/campaigns").json()["count"] == 2
    google = client.get("/api/campaigns", params={"platform": "Google"}).json()
    assert [c["name"] for c in google["data"]] == ["Launch"]
    active = client.get("/api/campaigns", params={"status": "active"}).json()
    assert active["count"] == 1
    june = client.get("/api/campaigns", params={"startDate": "2025-06-01", "endDate": "2025-06-30"}).json()
    assert [c["platform"] for c in june["data"]] == ["Facebook"]


def test_get_and_delete(client, campaign_payload):
    created = _create(client, campaign_payload())

    assert client.get(f"/api/campaigns/{created['id']}").json()["data"]["id"] == created["id"]

    res = client.delete(f"/api/campaigns/{created['id']}")
    assert res.json() == {"success": True, "message": "Campaign deleted successfully"}

    res = client.get(f"/api/campaigns/{created['id']}")
    assert res.status_code == 404
    assert res.json()["message"] == "Campaign not found"

    assert _create(client, campaign_payload(name="Relaunch"))["id"] != created["id"]


def test_overflowing_metrics_are_rejected(client, campaign_payload):
    res = client.post(
        "/api/campaigns",
        json=campaign_payload(budget=1e308, leadsGenerated=1, conversions=1),
    )

    assert res.status_code == 400
    assert res.json()["message"] == "Campaign figures are out of range"

    listing = client.get("/api/campaigns")
    assert listing.status_code == 200
    assert listing.json()["count"] == 0


def test_update_cannot_overflow_metrics(client, campaign_payload):
    created = _create(client, campaign_payload())

    res = client.put(f"/api/campaigns/{created['id']}", json={"budget": 1e308, "leadsGenerated": 1, "conversions": 1})

    assert res.status_code == 400
    assert client.get(f"/api/campaigns/{created['id']}").json()["data"]["budget"] == 5000


def test_campaign_stats(client, campaign_payload):
    _create(client, campaign_payload())
    _create(client, campaign_payload(name="Launch", platform="Google", budget=8000,
                                     leadsGenerated=320, conversions=68, status="active"))

    stats = client.get("/api/campaigns/stats/overview").json()["data"]

    assert stats["totalCampaigns"] == 2
    assert stats["activeCampaigns"] == 1
    assert stats["totalBudget"] == 13000
    assert stats["totalLeads"] == 570
    assert stats["totalConversions"] == 113
    assert [row["platform"] for row in stats["leadsByPlatform"]] == ["Google", "Facebook"]
    assert stats["monthlyCampaigns"] == [
        {"year": 2025, "month": 6, "count": 2, "budget": 13000.0, "leads": 570}
    ]
