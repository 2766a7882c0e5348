class TestClients:
    def test_create_list_update_delete(self, api, manager_headers, member_headers):
        res = api.post(
            "/clients",
            json={"name": "Gamma", "manager": "Tanaka", "businessDivision": "第三事業部", "priority": 5},
            headers=manager_headers,
        )
        assert res.status_code == 201
        created = res.json()
        assert created["businessDivision"] == "第三事業部"
        client_id = created["id"]

        listed = api.get("/clients?search=tana", headers=member_headers).json()
        assert listed["total"] == 1
        assert listed["items"][0]["name"] == "Gamma"
        assert listed["page"] == 1

        res = api.patch(f"/clients/{client_id}", json={"priority": 1}, headers=manager_headers)
        assert res.status_code == 200
        assert res.json()["priority"] == 1
        assert res.json()["name"] == "Gamma"

        assert api.delete(f"/clients/{client_id}", headers=manager_headers).status_code == 204
        assert api.get(f"/clients/{client_id}", headers=member_headers).status_code == 404

    def test_list_is_ordered_by_priority(self, api, member_headers, seed):
        names = [c["name"] for c in api.get("/clients", headers=member_headers).json()["items"]]
        assert names == ["Acme", "Beta"]

    def test_filter_by_department(self, api, member_headers, seed):
        res = api.get("/clients", params={"department": "第二事業部"}, headers=member_headers)
        assert [c["name"] for c in res.json()["items"]] == ["Beta"]

    def test_member_cannot_create(self, api, member_headers):
        res = api.post("/clients", json={"name": "X"}, headers=member_headers)
        assert res.status_code == 403

    def test_delete_cascades_to_campaign_records(self, api, manager_headers, member_headers, seed):
        api.post(
            "/budgets",
            json={
                "campaignId": seed["spring"], "year": 2024, "month": 1,
                "platform": "Google", "operationType": "運用代行", "amount": 1000,
            },
            headers=manager_headers,
        )
        assert api.delete(f"/clients/{seed['acme']}", headers=manager_headers).status_code == 204

        assert api.get(f"/campaigns/{seed['spring']}", headers=member_headers).status_code == 404
        assert api.get("/budgets", headers=member_headers).json()["total"] == 0


class TestCampaigns:
    def test_create_and_totals(self, api, manager_headers, member_headers, seed):
        res = api.post(
            "/campaigns",
            json={
                "clientId": seed["beta"], "name": "Summer", "totalBudget": 120000,
                "startYear": 2024, "startMonth": 6, "endYear": 2024, "endMonth": 8,
            },
            headers=manager_headers,
        )
        assert res.status_code == 201
        campaign = res.json()
        assert campaign["clientName"] == "Beta"
        assert campaign["status"] == "ended"

        api.post(
            "/budget-results",
            json={
                "campaignId": campaign["id"], "year": 2024, "month": 6, "platform": "Google",
                "operationType": "運用代行", "budgetAmount": 40000, "actualSpend": 30000,
            },
            headers=manager_headers,
        )
        detail = api.get(f"/campaigns/{campaign['id']}", headers=member_headers).json()
        assert detail["totalBudgetAmount"] == 40000.0
        assert detail["totalActualSpend"] == 30000.0

    def test_open_ended_campaign_is_active(self, api, member_headers, seed):
        detail = api.get(f"/campaigns/{seed['spring']}", headers=member_headers).json()
        assert detail["status"] == "active"
        assert detail["endYear"] is None

    def test_list_by_client(self, api, member_headers, seed):
        res = api.get(f"/campaigns?client={seed['acme']}", headers=member_headers).json()
        assert res["total"] == 2
        assert {c["name"] for c in res["items"]} == {"Spring Sale", "Brand Lift"}

    def test_end_before_start_is_rejected(self, api, manager_headers, seed):
        res = api.post(
            "/campaigns",
            json={
                "clientId": seed["acme"], "name": "Broken",
                "startYear": 2024, "startMonth": 6, "endYear": 2024, "endMonth": 1,
            },
            headers=manager_headers,
        )
        assert res.status_code == 422

    def test_partial_end_is_rejected(self, api, manager_headers, seed):
        res = api.post(
            "/campaigns",
            json={"clientId": seed["acme"], "name": "Half", "startYear": 2024, "startMonth": 6, "endYear": 2024},
            headers=manager_headers,
        )
        assert res.status_code == 422

    def test_patch_checks_merged_period(self, api, manager_headers, seed):
        res = api.patch(
            f"/campaigns/{seed['brand']}",
            json={"endYear": 2023, "endMonth": 1},
            headers=manager_headers,
        )
        assert res.status_code == 400

        res = api.patch(
            f"/campaigns/{seed['brand']}",
            json={"endYear": 2024, "endMonth": 3},
            headers=manager_headers,
        )
        assert res.status_code == 200
        assert (res.json()["endYear"], res.json()["endMonth"]) == (2024, 3)

    def test_unknown_client(self, api, manager_headers, seed):
        res = api.post(
            "/campaigns",
            json={"clientId": 9999, "name": "Ghost", "startYear": 2024, "startMonth": 1},
            headers=manager_headers,
        )
        assert res.status_code == 400


class TestBudgetsAndResults:
    def _budget(self, campaign_id, **extra):
        return {
            "campaignId": campaign_id, "year": 2024, "month": 1,
            "platform": "Google", "operationType": "運用代行", "amount": 1000, **extra,
        }

    def test_budget_crud(self, api, manager_headers, member_headers, seed):
        res = api.post("/budgets", json=self._budget(seed["spring"], targetKpi="CV", targetValue=10), headers=manager_headers)
        assert res.status_code == 201
        budget = res.json()
        assert budget["budgetType"] == "月次予算"
        assert budget["campaignName"] == "Spring Sale"
        assert budget["clientName"] == "Acme"

        res = api.patch(f"/budgets/{budget['id']}", json={"amount": 2500}, headers=manager_headers)
        assert res.json()["amount"] == 2500.0
        assert res.json()["targetKpi"] == "CV"

        listed = api.get("/budgets?year=2024&month=1", headers=member_headers).json()
        assert listed["total"] == 1

        assert api.delete(f"/budgets/{budget['id']}", headers=manager_headers).status_code == 204
        assert api.get(f"/budgets/{budget['id']}", headers=member_headers).status_code == 404

    def test_duplicate_budget_key_conflicts(self, api, manager_headers, seed):
        assert api.post("/budgets", json=self._budget(seed["spring"]), headers=manager_headers).status_code == 201
        res = api.post("/budgets", json=self._budget(seed["spring"]), headers=manager_headers)
        assert res.status_code == 409

    def test_budget_unknown_campaign(self, api, manager_headers, seed):
        res = api.post("/budgets", json=self._budget(9999), headers=manager_headers)
        assert res.status_code == 400

    def test_negative_amount_is_rejected(self, api, manager_headers, seed):
        res = api.post("/budgets", json=self._budget(seed["spring"], amount=-1), headers=manager_headers)
        assert res.status_code == 422

    def test_result_crud(self, api, manager_headers, member_headers, seed):
        payload = {
            "campaignId": seed["launch"], "year": 2024, "month": 2, "platform": "Yahoo",
            "operationType": "インハウス", "actualSpend": 700, "actualResult": 20,
        }
        res = api.post("/results", json=payload, headers=manager_headers)
        assert res.status_code == 201
        result = res.json()
        assert result["actualSpend"] == 700.0

        res = api.patch(f"/results/{result['id']}", json={"actualResult": 35}, headers=manager_headers)
        assert res.json()["actualResult"] == 35.0
        assert res.json()["actualSpend"] == 700.0

        listed = api.get(f"/results?client={seed['beta']}", headers=member_headers).json()
        assert listed["total"] == 1
        assert listed["items"][0]["clientName"] == "Beta"

        assert api.post("/results", json=payload, headers=manager_headers).status_code == 409

    def test_padded_key_text_is_trimmed_and_conflicts(self, api, manager_headers, member_headers, seed):
        padded = self._budget(seed["spring"], platform=" Google ", operationType="運用代行 ")
        res = api.post("/budgets", json=padded, headers=manager_headers)
        assert res.status_code == 201
        assert res.json()["platform"] == "Google"
        assert res.json()["operationType"] == "運用代行"

        res = api.post("/budgets", json=self._budget(seed["spring"]), headers=manager_headers)
        assert res.status_code == 409

        rows = api.get("/budget-results?year=2024&month=1", headers=member_headers).json()["data"]
        assert [(r["platform"], r["budgetAmount"]) for r in rows] == [("Google", 1000.0)]

    def test_padded_result_key_conflicts(self, api, manager_headers, seed):
        payload = {
            "campaignId": seed["launch"], "year": 2024, "month": 2, "platform": "Yahoo",
            "operationType": "インハウス", "budgetType": "月次予算 ", "actualSpend": 700,
        }
        assert api.post("/results", json=payload, headers=manager_headers).status_code == 201
        payload["budgetType"] = "月次予算"
        assert api.post("/results", json=payload, headers=manager_headers).status_code == 409

    def test_blank_key_text_is_rejected(self, api, manager_headers, seed):
        res = api.post("/budgets", json=self._budget(seed["spring"], platform="   "), headers=manager_headers)
        assert res.status_code == 422

    def test_patch_null_amount_is_rejected(self, api, manager_headers, seed):
        budget = api.post("/budgets", json=self._budget(seed["spring"]), headers=manager_headers).json()

        res = api.patch(f"/budgets/{budget['id']}", json={"amount": None}, headers=manager_headers)
        assert res.status_code == 422

        # 값은 그대로, nullable 항목은 null 로 비울 수 있다
        res = api.patch(f"/budgets/{budget['id']}", json={"targetKpi": None}, headers=manager_headers)
        assert res.status_code == 200
        assert res.json()["amount"] == 1000.0
        assert res.json()["targetKpi"] is None

    def test_patch_null_result_values_are_rejected(self, api, manager_headers, member_headers, seed):
        payload = {
            "campaignId": seed["launch"], "year": 2024, "month": 2, "platform": "Yahoo",
            "operationType": "インハウス", "actualSpend": 700, "actualResult": 20,
        }
        result = api.post("/results", json=payload, headers=manager_headers).json()

        for body in ({"actualSpend": None}, {"actualResult": None}):
            res = api.patch(f"/results/{result['id']}", json=body, headers=manager_headers)
            assert res.status_code == 422

        res = api.get(f"/results/{result['id']}", headers=member_headers)
        assert res.json()["actualSpend"] == 700.0
        assert res.json()["actualResult"] == 20.0
