# GraphQL documents sent to the Shopify Admin API.

PRODUCT_CREATE = """
mutation populateProduct($input: ProductInput!) {
  productCreate(input: $input) {
    product {
      id
      title
      descriptionHtml
      variants(first: 1) {
        edges {
          node {
            id
            price
          }
        }
      }
    }
    userErrors {
      field
      message
    }
  }
}
"""

VARIANT_UPDATE = """
mutation updateVariantPrice($input: ProductVariantInput!) {
  productVariantUpdate(input: $input) {
    productVariant {
      id
      price
      barcode
      createdAt
    }
    userErrors {
      field
      message
    }
  }
}
"""

COLLECTION_ADD_PRODUCTS = """
mutation addProductToCollection($id: ID!, $productIds: [ID!]!) {
  collectionAddProducts(id: $id, productIds: $productIds) {
    collection {
      id
      title
    }
    userErrors {
      field
      message
    }
  }
}
"""

PRODUCT_CREATE_MEDIA = """
mutation addProductImage($productId: ID!, $media: CreateMediaInput!) {
  productCreateMedia(productId: $productId, media: [$media]) {
    media {
      mediaContentType
      status
    }
    mediaUserErrors {
      field
      message
    }
  }
}
"""

PRODUCTS_QUERY = """
query fetchProducts($first: Int!) {
  products(first: $first) {
    edges {
      node {
        id
        title
        handle
        featuredImage {
          url
          altText
        }
      }
    }
  }
}
"""

COLLECTIONS_QUERY = """
query fetchCollections($first: Int!) {
  collections(first: $first) {
    edges {
      node {
        id
        title
      }
    }
  }
}
"""
