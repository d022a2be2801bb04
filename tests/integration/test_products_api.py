"""
Integration tests for the /v1/products endpoints.
"""
import uuid


class TestProductsApi:

    def test_create(self, client):
        response = client.post('/v1/products', json={'name': 'Rice Bag', 'price': 3.25})

        assert response.status_code == 201
        data = response.get_json()
        assert data['name'] == 'Rice Bag'
        assert data['price'] == 3.25

    def test_create_invalid(self, client):
        response = client.post('/v1/products', json={'name': 'ab', 'price': 1.999})

        assert response.status_code == 400
        assert response.get_json()['fields'][0]['field'] == 'name'

    def test_query_with_filters(self, client, products):
        data = client.get('/v1/products?name=coffee').get_json()
        assert data['total'] == 1
        assert data['items'][0]['price'] == 10.34

        ids = f'{products[1].id},{products[2].id}'
        data = client.get(f'/v1/products?product_ids={ids}&orderBy=price,desc').get_json()
        assert [p['name'] for p in data['items']] == ['Green Tea', 'Sugar Pack']

    def test_query_invalid_price(self, client):
        response = client.get('/v1/products?price=abc')
        assert response.status_code == 400
        assert response.get_json()['fields'][0]['field'] == 'price'

    def test_update(self, client, products):
        product_id = products[0].id
        response = client.put(f'/v1/products/{product_id}', json={'price': 12})

        assert response.status_code == 200
        assert response.get_json()['price'] == 12.0
        assert client.get(f'/v1/products/{product_id}').get_json()['name'] == 'Coffee Beans'

    def test_update_missing(self, client):
        assert client.put(f'/v1/products/{uuid.uuid4()}', json={'price': 1}).status_code == 404

    def test_delete(self, client, products):
        product_id = products[2].id
        assert client.delete(f'/v1/products/{product_id}').status_code == 204
        assert client.get(f'/v1/products/{product_id}').status_code == 404

    def test_create_price_too_large(self, client):
        response = client.post('/v1/products', json={'name': 'Gold Bar', 'price': 1e30})

        assert response.status_code == 400
        assert response.get_json()['fields'][0]['field'] == 'price'

    def test_delete_product_with_sales(self, client, auth_headers, products):
        product_id = products[0].id
        sale = client.post('/v1/sales', headers=auth_headers, json={
            'items': [{'productId': str(product_id), 'quantity': 1}],
        }).get_json()

        response = client.delete(f'/v1/products/{product_id}')

        assert response.status_code == 400
        assert response.get_json()['fields'][0]['field'] == 'product_id'
        assert client.get(f'/v1/products/{product_id}').status_code == 200
        items = client.get(f"/v1/sales/{sale['id']}").get_json()['items']
        assert items[0]['name'] == 'Coffee Beans'
