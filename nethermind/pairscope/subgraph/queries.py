"""GraphQL queries for Uniswap style DEX subgraphs"""

# V3 subgraphs index pools, and aggregate pool statistics into poolDayDatas
POOL_DAY_DATA_QUERY = """
query GetPoolDayData($pairAddress: String!, $days: Int!) {
  pool(id: $pairAddress) {
    id
    token0 {
      symbol
      name
    }
    token1 {
      symbol
      name
    }
    totalValueLockedToken0
    totalValueLockedToken1
    totalValueLockedUSD
  }
  poolDayDatas(
    first: $days
    orderBy: date
    orderDirection: desc
    where: { pool: $pairAddress }
  ) {
    date
    volumeUSD
    volumeToken0
    volumeToken1
    tvlUSD
    feesUSD
    txCount
    open
    high
    low
    close
    token0Price
    token1Price
  }
}
"""

# V2 subgraphs index pairs.  Daily volumes are prefixed with 'daily', and TVL is reported as reserveUSD
PAIR_DAY_DATA_QUERY = """
query GetPairDayData($pairAddress: String!, $days: Int!) {
  pair(id: $pairAddress) {
    id
    token0 {
      symbol
      name
    }
    token1 {
      symbol
      name
    }
    reserve0
    reserve1
    reserveUSD
  }
  pairDayDatas(
    first: $days
    orderBy: date
    orderDirection: desc
    where: { pairAddress: $pairAddress }
  ) {
    date
    dailyVolumeUSD
    dailyVolumeToken0
    dailyVolumeToken1
    reserveUSD
    dailyTxns
  }
}
"""
