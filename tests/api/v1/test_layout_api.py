"""Tests for dashboard layout endpoints."""

from app.domain.arrangement import WidgetLayout


LAYOUT = {
    "widgets": [
        {"id": "calendar", "enabled": True, "order": 0},
        {"id": "budget", "enabled": False, "order": 1},
    ],
    "hidden": ["budget"],
    "removed": ["notes"],
}


class TestLayoutApi:
    """Tests for GET/POST /api/v1/layout."""
    
    def test_missing_layout(self, client):
        """Unknown scope is a 404."""
        response = client.get("/api/v1/layout", params={"scope": "dash:u1"})
        
        assert response.status_code == 404
        assert response.json()["detail"]["error_code"] == "LAYOUT_NOT_FOUND"
    
    def test_save_and_get(self, client):
        """Saved layout comes back as stored."""
        saved = client.post("/api/v1/layout", json={"scope": "dash:u1", "layout": LAYOUT})
        
        assert saved.status_code == 200
        data = client.get("/api/v1/layout", params={"scope": "dash:u1"}).json()
        assert data["layout"] == LAYOUT
        assert data["revision"] == 1
    
    def test_layout_restores_widgets(self, client):
        """A stored layout rebuilds the user's dashboard."""
        client.post("/api/v1/layout", json={"scope": "dash:u1", "layout": LAYOUT})
        state = client.get("/api/v1/layout", params={"scope": "dash:u1"}).json()["layout"]
        
        layout = WidgetLayout.from_state(["budget", "calendar", "notes", "tasks"], state)
        
        assert layout.order() == ["calendar", "budget", "tasks"]
        assert layout.visible_ids() == ["calendar", "tasks"]
        assert layout.available_to_add() == ["notes"]
    
    def test_duplicate_widgets_rejected(self, client):
        """A widget listed twice is a 400."""
        layout = {"widgets": [{"id": "a"}, {"id": "a"}]}
        
        response = client.post("/api/v1/layout", json={"scope": "d", "layout": layout})
        
        assert response.status_code == 400
    
    def test_listed_and_removed_rejected(self, client):
        """A widget cannot be both listed and removed."""
        layout = {"widgets": [{"id": "a"}], "removed": ["a"]}
        
        response = client.post("/api/v1/layout", json={"scope": "d", "layout": layout})
        
        assert response.status_code == 400
        assert response.json()["detail"]["details"]["problems"][0]["problem"] == "listed and removed"
    
    def test_stale_revision(self, client):
        """Stale base revision is a 409."""
        client.post("/api/v1/layout", json={"scope": "d", "layout": LAYOUT})
        client.post("/api/v1/layout", json={"scope": "d", "layout": LAYOUT})
        
        response = client.post("/api/v1/layout", json={"scope": "d", "layout": LAYOUT, "base_revision": 1})
        
        assert response.status_code == 409
