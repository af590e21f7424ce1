NFT_ABI = """[
  {"type": "function", "name": "createToken", "stateMutability": "nonpayable",
   "inputs": [{"name": "tokenURI", "type": "string"}],
   "outputs": [{"name": "", "type": "uint256"}]},
  {"type": "function", "name": "tokenURI", "stateMutability": "view",
   "inputs": [{"name": "tokenId", "type": "uint256"}],
   "outputs": [{"name": "", "type": "string"}]},
  {"type": "event", "name": "Transfer", "anonymous": false,
   "inputs": [{"name": "from", "type": "address", "indexed": true},
              {"name": "to", "type": "address", "indexed": true},
              {"name": "tokenId", "type": "uint256", "indexed": true}]},
  {"type": "event", "name": "Approval", "anonymous": false,
   "inputs": [{"name": "owner", "type": "address", "indexed": true},
              {"name": "approved", "type": "address", "indexed": true},
              {"name": "tokenId", "type": "uint256", "indexed": true}]},
  {"type": "event", "name": "ApprovalForAll", "anonymous": false,
   "inputs": [{"name": "owner", "type": "address", "indexed": true},
              {"name": "operator", "type": "address", "indexed": true},
              {"name": "approved", "type": "bool", "indexed": false}]}
]"""

_MARKET_ITEM_COMPONENTS = """[
  {"name": "itemId", "type": "uint256"},
  {"name": "nftContract", "type": "address"},
  {"name": "tokenId", "type": "uint256"},
  {"name": "seller", "type": "address"},
  {"name": "owner", "type": "address"},
  {"name": "price", "type": "uint256"},
  {"name": "sold", "type": "bool"}
]"""

NFT_MARKET_ABI = """[
  {"type": "function", "name": "getListingPrice", "stateMutability": "view",
   "inputs": [],
   "outputs": [{"name": "", "type": "uint256"}]},
  {"type": "function", "name": "createMarketItem", "stateMutability": "payable",
   "inputs": [{"name": "nftContract", "type": "address"},
              {"name": "tokenId", "type": "uint256"},
              {"name": "price", "type": "uint256"}],
   "outputs": []},
  {"type": "function", "name": "createMarketSale", "stateMutability": "payable",
   "inputs": [{"name": "nftContract", "type": "address"},
              {"name": "itemId", "type": "uint256"}],
   "outputs": []},
  {"type": "function", "name": "fetchMarketItems", "stateMutability": "view",
   "inputs": [],
   "outputs": [{"name": "", "type": "tuple[]", "internalType": "struct NFTMarket.MarketItem[]",
                "components": %(components)s}]},
  {"type": "function", "name": "fetchItemsCreated", "stateMutability": "view",
   "inputs": [],
   "outputs": [{"name": "", "type": "tuple[]", "internalType": "struct NFTMarket.MarketItem[]",
                "components": %(components)s}]},
  {"type": "event", "name": "MarketItemCreated", "anonymous": false,
   "inputs": [{"name": "itemId", "type": "uint256", "indexed": true},
              {"name": "nftContract", "type": "address", "indexed": true},
              {"name": "tokenId", "type": "uint256", "indexed": true},
              {"name": "seller", "type": "address", "indexed": false},
              {"name": "owner", "type": "address", "indexed": false},
              {"name": "price", "type": "uint256", "indexed": false},
              {"name": "sold", "type": "bool", "indexed": false}]}
]""" % {"components": _MARKET_ITEM_COMPONENTS}

MARKET_ITEM_FIELDS = ("itemId", "nftContract", "tokenId", "seller", "owner", "price", "sold")
